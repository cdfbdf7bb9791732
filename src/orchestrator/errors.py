"""Pipeline error taxonomy.

Every error raised by a step is fatal to its run. The controller records the
first one on the run and re-raises it unchanged.
"""

from typing import Any

from src.config.constants import ErrorKind


class PipelineError(Exception):
    """Base class for errors surfaced by the pipeline."""

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind.value, "message": self.message}


class ValidationError(PipelineError):
    """Malformed or missing URL."""

    kind = ErrorKind.VALIDATION


class AcquisitionError(PipelineError):
    """Source fetch or original-content persistence failure."""

    kind = ErrorKind.ACQUISITION


class ModelUnavailable(PipelineError):
    """Both primary and fallback models failed for a task."""

    kind = ErrorKind.MODEL_UNAVAILABLE


class MalformedModelOutput(PipelineError):
    """Model response could not be parsed into the expected shape."""

    kind = ErrorKind.MALFORMED_MODEL_OUTPUT


class MissingState(PipelineError):
    """A required shared-state key is absent or has the wrong type."""

    kind = ErrorKind.MISSING_STATE


class RunNotFound(PipelineError):
    """No run record exists for the requested id."""

    kind = ErrorKind.RUN_NOT_FOUND


def error_payload(error: BaseException) -> dict[str, Any]:
    """Build the ``{kind, message}`` envelope for any exception."""
    if isinstance(error, PipelineError):
        return error.to_dict()
    return {"kind": ErrorKind.INTERNAL.value, "message": str(error) or type(error).__name__}
