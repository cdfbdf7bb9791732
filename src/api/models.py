"""Request/Response models for API endpoints."""

from typing import Any

from pydantic import BaseModel, Field


class GenerateBrandKitRequest(BaseModel):
    """Request model for brand kit generation."""

    url: str | None = Field(None, description="Website URL to analyze")


class ErrorDetail(BaseModel):
    """Error kind and message."""

    kind: str = Field(..., description="Error kind, e.g. ModelUnavailable")
    message: str = Field(..., description="Human-readable error message")


class ErrorResponse(BaseModel):
    """Envelope for failed requests."""

    success: bool = False
    error: ErrorDetail


class DataResponse(BaseModel):
    """Envelope for successful requests."""

    success: bool = True
    data: Any = None


class HealthResponse(BaseModel):
    """Response model for health endpoint."""

    success: bool = True
    status: str = Field(..., description="Service status")
    version: str = Field(..., description="Application version")
    timestamp: str = Field(..., description="Server time (ISO 8601)")
