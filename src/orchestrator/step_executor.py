"""Execution of a single named pipeline step."""

import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from src.config.constants import PipelineStep, StepStatus
from src.config.settings import Settings
from src.infrastructure.logging.logger import StructuredLogger
from src.infrastructure.logging.session_logger import SessionLogger
from src.orchestrator.errors import error_payload
from src.orchestrator.models import PipelineRun, StepRecord, utc_now
from src.orchestrator.state import RunState, StateKey

logger = logging.getLogger(__name__)

StepHandler = Callable[[RunState], Awaitable[dict[str, Any]]]

_MAX_SUMMARY_ITEMS = 10


@dataclass(frozen=True)
class StepDefinition:
    """A named unit of work and the state keys it reads and writes."""

    name: PipelineStep
    description: str
    handler: StepHandler
    requires: tuple[StateKey, ...] = ()
    produces: tuple[StateKey, ...] = ()


def bound_summary(value: Any, max_chars: int) -> Any:
    """Cap every string in a summary at ``max_chars`` and every list at a few items."""
    if isinstance(value, str):
        return value if len(value) <= max_chars else value[:max_chars] + "..."
    if isinstance(value, dict):
        return {k: bound_summary(v, max_chars) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [bound_summary(v, max_chars) for v in value[:_MAX_SUMMARY_ITEMS]]
    return value


class StepExecutor:
    """Runs one step: Pending -> Running -> Succeeded | Failed.

    The step's full output goes into the run's shared state. Only a bounded
    summary is returned to the caller and kept on the StepRecord. Failures are
    recorded and re-raised; there is no retry at this level.
    """

    def __init__(self, settings: Settings, structured_logger: StructuredLogger | None = None):
        self.settings = settings
        self.structured_logger = structured_logger or StructuredLogger(__name__)

    async def execute(
        self,
        run: PipelineRun,
        state: RunState,
        step: StepDefinition,
        session_logger: SessionLogger | None = None,
    ) -> dict[str, Any]:
        name = step.name.value
        pending = StepRecord(name=name, status=StepStatus.PENDING)
        run.record_step(pending)

        running = pending.model_copy(update={"status": StepStatus.RUNNING, "started_at": utc_now()})
        run.record_step(running)
        logger.info(f"{name}: {step.description}")

        state.begin_step(name)
        start = time.time()
        try:
            summary = await step.handler(state)
        except Exception as e:
            elapsed_ms = (time.time() - start) * 1000
            error = error_payload(e)
            run.record_step(
                running.model_copy(
                    update={
                        "status": StepStatus.FAILED,
                        "ended_at": utc_now(),
                        "duration_ms": elapsed_ms,
                        "error": error,
                    }
                )
            )
            self.structured_logger.log_error(name, e, {"run_id": run.id, "kind": error["kind"]})
            if session_logger:
                session_logger.log_step(name, StepStatus.FAILED.value, error=error, execution_time_ms=elapsed_ms)
            raise
        finally:
            state.end_step()

        elapsed_ms = (time.time() - start) * 1000
        bounded = bound_summary(summary or {}, self.settings.step_summary_max_chars)
        run.record_step(
            running.model_copy(
                update={
                    "status": StepStatus.SUCCEEDED,
                    "ended_at": utc_now(),
                    "duration_ms": elapsed_ms,
                    "summary": bounded,
                }
            )
        )
        run.completed_steps.append(name)

        self.structured_logger.log_step(name, {"run_id": run.id, **bounded}, duration_ms=elapsed_ms)
        if session_logger:
            session_logger.log_step(name, StepStatus.SUCCEEDED.value, summary=bounded, execution_time_ms=elapsed_ms)
        return bounded
