"""FastAPI dependencies."""

import logging
from functools import lru_cache

from fastapi import Depends, FastAPI, Request

from src.config.settings import Settings, get_settings
from src.orchestrator.pipeline import PipelineController

logger = logging.getLogger(__name__)


@lru_cache
def get_settings_dependency() -> Settings:
    """Get settings as a FastAPI dependency."""
    return get_settings()


def get_pipeline_controller(
    request: Request,
    settings: Settings = Depends(get_settings_dependency),  # noqa: B008
) -> PipelineController:
    """Return the app-wide controller, building it on first use.

    One controller per process keeps the router's health cache and the
    provider SDK clients alive across requests.
    """
    controller = getattr(request.app.state, "pipeline_controller", None)
    if controller is None:
        controller = PipelineController(settings)
        request.app.state.pipeline_controller = controller
    return controller


async def close_pipeline_controller(app: FastAPI) -> None:
    """Release the app-wide controller, if one was built."""
    controller = getattr(app.state, "pipeline_controller", None)
    if controller is None:
        return
    app.state.pipeline_controller = None
    await controller.aclose()
    logger.info("Pipeline controller closed")
