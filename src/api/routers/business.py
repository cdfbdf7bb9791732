"""Brand kit endpoints."""

import logging
from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter, Depends

from src.api.dependencies import get_pipeline_controller, get_settings_dependency
from src.api.models import DataResponse, ErrorResponse, GenerateBrandKitRequest, HealthResponse
from src.config.settings import Settings
from src.infrastructure.storage.result_store import ResultStore
from src.orchestrator.errors import MissingState, RunNotFound
from src.orchestrator.pipeline import PipelineController

logger = logging.getLogger(__name__)

router = APIRouter()

ERROR_RESPONSES = {status: {"model": ErrorResponse} for status in (400, 404, 500, 502, 503)}


@router.post("/generate-brandkit", response_model=DataResponse, responses=ERROR_RESPONSES)
async def generate_brandkit(
    request: GenerateBrandKitRequest,
    controller: PipelineController = Depends(get_pipeline_controller),  # noqa: B008
) -> dict[str, Any]:
    """
    Generate a brand kit for a URL.

    Runs the full pipeline synchronously:
    1. Acquisition (original content preserved, processed copy capped)
    2. Brand analysis
    3. Competitor analysis
    4. Compile and persist the result
    """
    logger.info(f"Received request to analyze {request.url}")
    result = await controller.run(request.url)
    return {"success": True, "data": result.to_json_dict()}


@router.get("/brandkit/{result_id}", response_model=DataResponse, responses=ERROR_RESPONSES)
async def get_brandkit(
    result_id: str,
    settings: Settings = Depends(get_settings_dependency),  # noqa: B008
) -> dict[str, Any]:
    """Get a stored brand kit result."""
    try:
        data = await ResultStore(settings).get(result_id)
    except ValueError:
        data = None
    if data is None:
        raise RunNotFound(f"Brand kit '{result_id}' not found")
    return {"success": True, "data": data}


@router.get("/brandkits", response_model=DataResponse)
async def list_brandkits(
    settings: Settings = Depends(get_settings_dependency),  # noqa: B008
) -> dict[str, Any]:
    """List all stored brand kits."""
    return {"success": True, "data": await ResultStore(settings).list_summaries()}


@router.get("/runs/{run_id}", response_model=DataResponse, responses=ERROR_RESPONSES)
async def get_run(
    run_id: str,
    controller: PipelineController = Depends(get_pipeline_controller),  # noqa: B008
) -> dict[str, Any]:
    """Get a run record with its step history."""
    run = await controller.get_run(run_id)
    return {"success": True, "data": run.model_dump(mode="json", by_alias=True)}


@router.get("/runs/{run_id}/artifact", response_model=DataResponse, responses=ERROR_RESPONSES)
async def get_artifact_summary(
    run_id: str,
    controller: PipelineController = Depends(get_pipeline_controller),  # noqa: B008
) -> dict[str, Any]:
    """Lengths, truncation flag and original storage reference for a run."""
    try:
        summary = await controller.get_artifact_summary(run_id)
    except MissingState as e:
        raise RunNotFound(e.message) from e
    return {"success": True, "data": summary.model_dump(mode="json", by_alias=True)}


@router.get("/health", response_model=HealthResponse)
async def health(
    settings: Settings = Depends(get_settings_dependency),  # noqa: B008
) -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        version=settings.app_version,
        timestamp=datetime.now(UTC).isoformat(),
    )
