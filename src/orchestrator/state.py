"""Per-run shared state.

Each run owns one RunState. Steps read what earlier steps wrote and write
their own outputs; only the step currently marked active may write. The
store hands out scopes by run id and drops them when the run terminates, so
concurrent runs never see each other's data.

Steps run strictly in sequence, so a scope has a single writer at a time and
needs no locking. Running steps of one run in parallel would require adding
synchronization here first.
"""

import logging
from enum import Enum
from typing import Any, TypeVar

from src.orchestrator.errors import MissingState

logger = logging.getLogger(__name__)

T = TypeVar("T")


class StateKey(str, Enum):
    """Keys steps use to exchange payloads."""

    SCRAPED_PAGE = "scraped_page"
    CONTENT_ARTIFACT = "content_artifact"
    BRAND_KIT = "brand_kit"
    COMPETITORS = "competitors"
    RESULT = "result"


class RunState:
    """Key/value scope for exactly one run."""

    def __init__(self, run_id: str):
        self.run_id = run_id
        self.active_step: str | None = None
        self._values: dict[StateKey, Any] = {}
        self._writers: dict[StateKey, str] = {}

    def begin_step(self, step: str) -> None:
        if self.active_step is not None:
            raise RuntimeError(
                f"Run {self.run_id}: step '{step}' started while '{self.active_step}' is active"
            )
        self.active_step = step

    def end_step(self) -> None:
        self.active_step = None

    def set(self, key: StateKey, value: Any) -> None:
        if self.active_step is None:
            raise RuntimeError(f"Run {self.run_id}: write to '{key.value}' outside of a step")
        self._values[key] = value
        self._writers[key] = self.active_step
        logger.debug(f"Run {self.run_id}: '{self.active_step}' wrote '{key.value}'")

    def get(self, key: StateKey) -> Any | None:
        return self._values.get(key)

    def has(self, key: StateKey) -> bool:
        return key in self._values

    def require(self, key: StateKey, expected_type: type[T] | None = None) -> T:
        """Read a key an earlier step must have written.

        Raises:
            MissingState: If the key is absent or holds the wrong type
        """
        if key not in self._values:
            raise MissingState(f"Run {self.run_id}: required state '{key.value}' is missing")
        value = self._values[key]
        if expected_type is not None and not isinstance(value, expected_type):
            raise MissingState(
                f"Run {self.run_id}: state '{key.value}' holds {type(value).__name__}, "
                f"expected {expected_type.__name__}"
            )
        return value

    def missing(self, keys: tuple[StateKey, ...]) -> list[StateKey]:
        return [k for k in keys if k not in self._values]

    def written_by(self, key: StateKey) -> str | None:
        return self._writers.get(key)

    def keys(self) -> list[StateKey]:
        return list(self._values)

    def clear(self) -> None:
        self._values.clear()
        self._writers.clear()
        self.active_step = None


class SharedStateStore:
    """Hands out RunState scopes keyed by run id."""

    def __init__(self) -> None:
        self._scopes: dict[str, RunState] = {}

    def init(self, run_id: str) -> RunState:
        """Create an empty scope for ``run_id``."""
        if run_id in self._scopes:
            raise RuntimeError(f"Shared state for run {run_id} already exists")
        scope = RunState(run_id)
        self._scopes[run_id] = scope
        return scope

    def get(self, run_id: str) -> RunState:
        scope = self._scopes.get(run_id)
        if scope is None:
            raise MissingState(f"No shared state for run {run_id}")
        return scope

    def clear(self, run_id: str) -> None:
        """Discard the scope for ``run_id``. Unknown ids are ignored."""
        scope = self._scopes.pop(run_id, None)
        if scope is not None:
            scope.clear()
            logger.debug(f"Cleared shared state for run {run_id}")

    def __contains__(self, run_id: str) -> bool:
        return run_id in self._scopes

    def __len__(self) -> int:
        return len(self._scopes)
