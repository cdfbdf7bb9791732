"""Tests for per-run shared state."""

import pytest

from src.orchestrator.errors import MissingState
from src.orchestrator.state import RunState, SharedStateStore, StateKey


def test_write_inside_step_is_readable_later():
    state = RunState("bkit_a")
    state.begin_step("acquisition")
    state.set(StateKey.BRAND_KIT, "kit")
    state.end_step()

    assert state.get(StateKey.BRAND_KIT) == "kit"
    assert state.require(StateKey.BRAND_KIT, str) == "kit"
    assert state.written_by(StateKey.BRAND_KIT) == "acquisition"


def test_write_outside_step_is_rejected():
    state = RunState("bkit_a")
    with pytest.raises(RuntimeError):
        state.set(StateKey.BRAND_KIT, "kit")


def test_nested_steps_are_rejected():
    state = RunState("bkit_a")
    state.begin_step("acquisition")
    with pytest.raises(RuntimeError):
        state.begin_step("brand_analysis")


def test_require_missing_key_raises():
    state = RunState("bkit_a")
    with pytest.raises(MissingState, match="brand_kit"):
        state.require(StateKey.BRAND_KIT)


def test_require_wrong_type_raises():
    state = RunState("bkit_a")
    state.begin_step("acquisition")
    state.set(StateKey.BRAND_KIT, 42)
    state.end_step()

    with pytest.raises(MissingState, match="expected str"):
        state.require(StateKey.BRAND_KIT, str)


def test_missing_lists_absent_keys_in_order():
    state = RunState("bkit_a")
    state.begin_step("acquisition")
    state.set(StateKey.SCRAPED_PAGE, object())
    state.end_step()

    assert state.missing((StateKey.SCRAPED_PAGE, StateKey.CONTENT_ARTIFACT, StateKey.BRAND_KIT)) == [
        StateKey.CONTENT_ARTIFACT,
        StateKey.BRAND_KIT,
    ]


def test_store_scopes_are_isolated():
    store = SharedStateStore()
    first = store.init("bkit_1")
    second = store.init("bkit_2")

    first.begin_step("acquisition")
    first.set(StateKey.BRAND_KIT, "first")
    first.end_step()

    assert not second.has(StateKey.BRAND_KIT)
    assert store.get("bkit_1") is first
    assert len(store) == 2


def test_store_rejects_duplicate_run_id():
    store = SharedStateStore()
    store.init("bkit_1")
    with pytest.raises(RuntimeError):
        store.init("bkit_1")


def test_store_clear_drops_scope():
    store = SharedStateStore()
    scope = store.init("bkit_1")
    scope.begin_step("acquisition")
    scope.set(StateKey.RESULT, "r")
    scope.end_step()

    store.clear("bkit_1")

    assert "bkit_1" not in store
    assert scope.keys() == []
    with pytest.raises(MissingState):
        store.get("bkit_1")


def test_store_clear_unknown_is_noop():
    SharedStateStore().clear("bkit_unknown")
