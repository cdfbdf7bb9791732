"""FastAPI application entry point."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.api.dependencies import close_pipeline_controller
from src.api.routers import api_router
from src.config.constants import ErrorKind
from src.config.settings import Settings, get_settings
from src.infrastructure.logging.logger import setup_logging
from src.orchestrator.errors import PipelineError, error_payload

settings = get_settings()

setup_logging(
    level=settings.log_level,
    json_output=not settings.debug,
    silence_noisy_loggers=True,
)

logger = logging.getLogger(__name__)

ERROR_STATUS_CODES: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.RUN_NOT_FOUND: 404,
    ErrorKind.ACQUISITION: 502,
    ErrorKind.MALFORMED_MODEL_OUTPUT: 502,
    ErrorKind.MODEL_UNAVAILABLE: 503,
    ErrorKind.MISSING_STATE: 500,
    ErrorKind.INTERNAL: 500,
}


def _validate_startup_config(settings: Settings) -> None:
    """Validate required configuration at startup."""
    has_api_key = any(
        [
            settings.anthropic_api_key,
            settings.openai_api_key,
            settings.azure_ai_project_endpoint,
        ]
    )
    if not has_api_key:
        logger.warning(
            "No model provider configured (anthropic_api_key, openai_api_key, or azure_ai_project_endpoint)"
        )
    if not settings.mock_data_dir.is_dir():
        logger.warning("mock_data_dir %s does not exist, acquisition will fail", settings.mock_data_dir)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup and shutdown lifecycle."""
    logger.info("Starting Brand Kit Pipeline")
    _validate_startup_config(settings)
    logger.info(
        "Content budget: %s chars (%s tokens x %s chars/token)",
        settings.content_char_budget,
        settings.content_max_input_tokens,
        settings.content_chars_per_token,
    )

    yield
    logger.info("Shutting down Brand Kit Pipeline")
    try:
        await close_pipeline_controller(app)
    except Exception as e:
        logger.error("Error closing pipeline controller: %s", e, exc_info=True)
    if settings.azure_ai_project_endpoint:
        try:
            from src.infrastructure.llm.factory import close_shared_credential

            await close_shared_credential()
            logger.info("Shared async credential closed")
        except Exception as e:
            logger.error("Error closing shared credential: %s", e, exc_info=True)


app = FastAPI(
    title="Brand Kit Pipeline",
    description="Website to brand kit and competitor analysis pipeline",
    version=settings.app_version,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials="*" not in settings.allowed_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(PipelineError)
async def pipeline_error_handler(request: Request, exc: PipelineError) -> JSONResponse:
    status_code = ERROR_STATUS_CODES.get(exc.kind, 500)
    if status_code >= 500:
        logger.error(f"Error processing {request.url.path}: {exc.kind.value}: {exc.message}")
    return JSONResponse(status_code=status_code, content={"success": False, "error": exc.to_dict()})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled error processing {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(status_code=500, content={"success": False, "error": error_payload(exc)})


app.include_router(api_router, prefix="/api")
