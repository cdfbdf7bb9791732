"""Tests for dual-tier content preservation."""

import time

import pytest

from src.infrastructure.storage.content_store import ContentStore
from src.orchestrator.errors import AcquisitionError
from src.services.content.policy import (
    ContentPreservationPolicy,
    char_budget,
    truncate_to_budget,
)

# ==========================================
#  BUDGET HELPERS
# ==========================================


def test_char_budget_default_ratio():
    assert char_budget(950_000, 4.0) == 3_800_000


def test_settings_budget_matches_helper(settings):
    assert settings.content_char_budget == 3_800_000


@pytest.mark.parametrize("tokens,ratio", [(0, 4.0), (100, 0), (-1, 4.0)])
def test_char_budget_rejects_non_positive(tokens, ratio):
    with pytest.raises(ValueError):
        char_budget(tokens, ratio)


def test_truncate_within_budget_is_identity():
    assert truncate_to_budget("abc", 3) == ("abc", False)


def test_truncate_keeps_prefix():
    processed, truncated = truncate_to_budget("abcdef", 4)
    assert processed == "abcd"
    assert truncated is True


def test_truncate_zero_budget():
    assert truncate_to_budget("abc", 0) == ("", True)


# ==========================================
#  POLICY
# ==========================================


@pytest.mark.asyncio
async def test_small_page_is_not_truncated(settings):
    """39,000 chars under a 3,800,000 budget pass through unchanged."""
    store = ContentStore(settings)
    policy = ContentPreservationPolicy(settings, store)
    text = "a" * 39_000

    artifact = await policy.preserve(text)

    assert artifact.truncated is False
    assert artifact.processed == text
    assert artifact.original_length == artifact.processed_length == 39_000
    assert await store.read(artifact.original_reference) == text


@pytest.mark.asyncio
async def test_large_page_is_truncated_and_original_kept(settings):
    """4,000,000 chars are cut to the budget; the original stays retrievable."""
    store = ContentStore(settings)
    policy = ContentPreservationPolicy(settings, store)
    text = "b" * 3_900_000 + "c" * 100_000

    artifact = await policy.preserve(text)

    assert artifact.truncated is True
    assert artifact.original_length == 4_000_000
    assert artifact.processed_length == 3_800_000
    assert artifact.processed == text[:3_800_000]
    stored = await store.read(artifact.original_reference)
    assert len(stored) == 4_000_000
    assert stored == text


@pytest.mark.asyncio
async def test_empty_content_is_still_persisted(settings):
    store = ContentStore(settings)
    artifact = await ContentPreservationPolicy(settings, store).preserve("")

    assert artifact.truncated is False
    assert artifact.processed == ""
    assert store.exists(artifact.original_reference)


@pytest.mark.asyncio
async def test_persistence_failure_raises_acquisition_error(settings):
    class BrokenStore:
        async def save(self, content):
            raise OSError("disk full")

    policy = ContentPreservationPolicy(settings, BrokenStore())

    with pytest.raises(AcquisitionError, match="disk full"):
        await policy.preserve("anything")


@pytest.mark.asyncio
async def test_budget_override(settings):
    policy = ContentPreservationPolicy(settings, ContentStore(settings), budget=10)
    artifact = await policy.preserve("x" * 25)

    assert artifact.budget == 10
    assert artifact.processed_length == 10
    assert artifact.truncated is True


@pytest.mark.asyncio
async def test_summary_preview_is_bounded(settings):
    policy = ContentPreservationPolicy(settings, ContentStore(settings))
    artifact = await policy.preserve("z" * 2_000)

    summary = artifact.summary(preview_chars=100)

    assert summary.preview == "z" * 100 + "..."
    assert summary.original_length == 2_000
    assert summary.original_reference == artifact.original_reference
    assert "original" not in artifact.model_dump()


@pytest.mark.asyncio
async def test_line_endings_survive_round_trip(settings):
    store = ContentStore(settings)
    text = "line one\r\nline two\rthree\n"
    artifact = await ContentPreservationPolicy(settings, store).preserve(text)

    stored = await store.read(artifact.original_reference)

    assert stored == text
    assert len(stored) == artifact.original_length == 25
    assert artifact.processed == text


@pytest.mark.asyncio
async def test_storage_timeout_raises_acquisition_error(settings, monkeypatch):
    slow = settings.model_copy(update={"storage_timeout": 0.05})
    store = ContentStore(slow)
    monkeypatch.setattr(store, "_write", lambda reference, content: time.sleep(0.5))

    with pytest.raises(AcquisitionError, match="TimeoutError"):
        await ContentPreservationPolicy(slow, store).preserve("anything")

# ==========================================
#  CONTENT STORE
# ==========================================


def test_new_references_are_unique():
    refs = {ContentStore.new_reference() for _ in range(50)}
    assert len(refs) == 50
    assert all(r.startswith("content_") and r.endswith(".txt") for r in refs)


def test_reference_outside_store_is_rejected(settings):
    store = ContentStore(settings)
    with pytest.raises(ValueError):
        store.exists("../escape.txt")


@pytest.mark.asyncio
async def test_read_unknown_reference(settings):
    with pytest.raises(FileNotFoundError):
        await ContentStore(settings).read("content_missing.txt")


@pytest.mark.asyncio
async def test_store_write_respects_storage_timeout(settings, monkeypatch):
    store = ContentStore(settings.model_copy(update={"storage_timeout": 0.05}))
    monkeypatch.setattr(store, "_write", lambda reference, content: time.sleep(0.5))

    with pytest.raises(TimeoutError):
        await store.save("anything")


@pytest.mark.asyncio
async def test_store_read_respects_storage_timeout(settings, monkeypatch):
    store = ContentStore(settings.model_copy(update={"storage_timeout": 0.05}))
    reference = await store.save("kept")
    monkeypatch.setattr(store, "_read", lambda reference: time.sleep(0.5))

    with pytest.raises(TimeoutError):
        await store.read(reference)
