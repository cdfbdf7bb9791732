"""
Constants, enums, and static values.
"""

from enum import Enum


class PipelineStep(str, Enum):
    """Pipeline execution steps, in execution order."""

    ACQUISITION = "acquisition"
    BRAND_ANALYSIS = "brand_analysis"
    COMPETITOR_ANALYSIS = "competitor_analysis"
    COMPILE = "compile"


class PipelineStepDescription(str, Enum):
    """Pipeline execution step descriptions."""

    ACQUISITION = "Acquire the website content and preserve the original copy"
    BRAND_ANALYSIS = "Generate the brand kit from the processed website content"
    COMPETITOR_ANALYSIS = "Identify direct competitors from the brand kit"
    COMPILE = "Compile and persist the final brand kit result"


class PipelineStatus(str, Enum):
    """Pipeline run status."""

    PENDING = "pending"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class StepStatus(str, Enum):
    """Status of a single step within a run."""

    PENDING = "pending"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class ModelTask(str, Enum):
    """Named tasks served by the model router."""

    BRAND_ANALYSIS = "brand_analysis"
    COMPETITOR_ANALYSIS = "competitor_analysis"


class ProviderName(str, Enum):
    """Model provider identifiers."""

    ANTHROPIC = "anthropic"
    AZURE = "azure"
    OPENAI = "openai"


class ErrorKind(str, Enum):
    """Error kinds surfaced to callers."""

    VALIDATION = "ValidationError"
    ACQUISITION = "AcquisitionError"
    MODEL_UNAVAILABLE = "ModelUnavailable"
    MALFORMED_MODEL_OUTPUT = "MalformedModelOutput"
    MISSING_STATE = "MissingState"
    RUN_NOT_FOUND = "RunNotFound"
    INTERNAL = "InternalError"


RUN_ID_PREFIX = "bkit_"
RUN_ID_LENGTH = 10
