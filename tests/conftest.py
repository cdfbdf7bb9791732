"""Pytest configuration and fixtures."""

import json
from collections.abc import Callable

import pytest

from src.config.settings import Settings
from src.infrastructure.llm.router import ModelRouter
from tests.fakes import FakeProvider


@pytest.fixture
def settings(tmp_path):
    """Provide settings isolated to a temporary data directory."""
    mock_dir = tmp_path / "mock"
    mock_dir.mkdir()
    (mock_dir / "spoonity-sample.json").write_text(
        json.dumps({"title": "Spoonity", "description": "Loyalty", "text": "Spoonity loyalty platform. " * 20}),
        encoding="utf-8",
    )
    (mock_dir / "tapistro-sample.json").write_text(
        json.dumps({"title": "Tapistro", "text": "Tapistro GTM orchestration. " * 200}),
        encoding="utf-8",
    )
    return Settings(
        _env_file=None,
        data_dir=tmp_path / "data",
        mock_data_dir=mock_dir,
        session_logs_dir=tmp_path / "logs",
        model_retry_delay=0,
        model_health_cache_ttl=0,
    )


@pytest.fixture
def primary():
    return FakeProvider("anthropic")


@pytest.fixture
def fallback():
    return FakeProvider("azure")


@pytest.fixture
def make_router(settings) -> Callable[..., ModelRouter]:
    """Build a ModelRouter over fake providers."""

    def _make(*providers: FakeProvider) -> ModelRouter:
        return ModelRouter(settings, providers={p.name: p for p in providers})

    return _make
