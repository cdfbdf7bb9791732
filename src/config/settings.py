"""Application settings using Pydantic BaseSettings."""

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
_VALID_PROVIDERS = {"anthropic", "azure", "openai"}

_PROJECT_ROOT = Path(__file__).parent.parent.parent


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Brand Kit Pipeline"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        upper = v.upper()
        if upper not in _VALID_LOG_LEVELS:
            raise ValueError(f"log_level must be one of {_VALID_LOG_LEVELS}, got '{v}'")
        return upper

    @field_validator(
        "brand_analysis_primary_provider",
        "brand_analysis_fallback_provider",
        "competitor_analysis_primary_provider",
        "competitor_analysis_fallback_provider",
    )
    @classmethod
    def validate_provider(cls, v: str) -> str:
        lower = v.lower()
        if lower not in _VALID_PROVIDERS:
            raise ValueError(f"provider must be one of {_VALID_PROVIDERS}, got '{v}'")
        return lower

    @model_validator(mode="after")
    def validate_timeouts_positive(self) -> "Settings":
        for field_name in (
            "model_timeout",
            "model_health_timeout",
            "storage_timeout",
            "acquisition_timeout",
        ):
            value = getattr(self, field_name)
            if value <= 0:
                raise ValueError(f"{field_name} must be positive, got {value}")
        return self

    @model_validator(mode="after")
    def validate_budget(self) -> "Settings":
        if self.content_max_input_tokens <= 0:
            raise ValueError("content_max_input_tokens must be positive")
        if self.content_chars_per_token <= 0:
            raise ValueError("content_chars_per_token must be positive")
        if self.model_max_attempts < 1:
            raise ValueError("model_max_attempts must be at least 1")
        return self

    @model_validator(mode="after")
    def warn_wildcard_origins(self) -> "Settings":
        if self.allowed_origins == ["*"]:
            logging.getLogger(__name__).warning(
                "allowed_origins is set to ['*'], consider restricting in production"
            )
        return self

    # Azure AI Foundry
    azure_ai_project_endpoint: str = ""

    # Anthropic
    anthropic_api_key: str | None = None

    # OpenAI
    openai_api_key: str | None = None
    openai_base_url: str | None = None

    # Brand Analysis task
    brand_analysis_primary_provider: str = "anthropic"
    brand_analysis_primary_model: str = "claude-sonnet-4-5"
    brand_analysis_fallback_provider: str = "azure"
    brand_analysis_fallback_model: str = "gpt-4.1"
    brand_analysis_temperature: float = 0.1
    brand_analysis_max_tokens: int = 3000

    # Competitor Analysis task
    competitor_analysis_primary_provider: str = "anthropic"
    competitor_analysis_primary_model: str = "claude-sonnet-4-5"
    competitor_analysis_fallback_provider: str = "azure"
    competitor_analysis_fallback_model: str = "gpt-4.1"
    competitor_analysis_temperature: float = 0.1
    competitor_analysis_max_tokens: int = 3000
    expected_competitor_count: int = 3

    # Model routing
    model_max_attempts: int = 2
    model_retry_delay: float = 2.0
    retry_backoff_factor: float = 2.0
    model_health_cache_ttl: int = 60

    # Content budget (characters = tokens * chars_per_token)
    content_max_input_tokens: int = 950_000
    content_chars_per_token: float = 4.0
    content_preview_chars: int = 500
    step_summary_max_chars: int = 500

    # Timeouts
    model_timeout: float = 120.0
    model_health_timeout: float = 10.0
    storage_timeout: float = 30.0
    acquisition_timeout: float = 30.0

    # Storage
    data_dir: Path = _PROJECT_ROOT / "data"
    mock_data_dir: Path = _PROJECT_ROOT / "data" / "mock"
    mock_small_file: str = "spoonity-sample.json"
    mock_large_file: str = "tapistro-sample.json"

    # Session logs (markdown per step)
    session_logs_enabled: bool = False
    session_logs_dir: Path = _PROJECT_ROOT / "logs"

    # CORS
    allowed_origins: list[str] = ["*"]

    @property
    def content_char_budget(self) -> int:
        """Character ceiling derived from the model input token limit."""
        return int(self.content_max_input_tokens * self.content_chars_per_token)

    @property
    def content_dir(self) -> Path:
        return self.data_dir / "content"

    @property
    def results_dir(self) -> Path:
        return self.data_dir / "results"

    @property
    def runs_dir(self) -> Path:
        return self.data_dir / "runs"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
