"""Tests for the brand kit HTTP endpoints."""

from types import SimpleNamespace

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.api.dependencies import (
    close_pipeline_controller,
    get_pipeline_controller,
    get_settings_dependency,
)
from src.app import app
from src.orchestrator.pipeline import PipelineController
from tests.fakes import FakeProvider


@pytest.fixture
def providers():
    return {"anthropic": FakeProvider("anthropic"), "azure": FakeProvider("azure")}


@pytest.fixture
def client(settings, make_router, providers):
    def _controller():
        return PipelineController(settings, router=make_router(*providers.values()))

    app.dependency_overrides[get_settings_dependency] = lambda: settings
    app.dependency_overrides[get_pipeline_controller] = _controller
    yield TestClient(app)
    app.dependency_overrides.clear()


# ==========================================
#  HEALTH
# ==========================================


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["status"] == "healthy"


def test_business_health(client):
    response = client.get("/api/business/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


# ==========================================
#  GENERATE
# ==========================================


def test_generate_brandkit(client):
    response = client.post("/api/business/generate-brandkit", json={"url": "https://spoonity.com"})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    data = body["data"]
    assert data["id"].startswith("bkit_")
    assert data["url"] == "https://spoonity.com"
    assert set(data["brandKit"]) == {
        "aboutTheBrand",
        "idealCustomerProfile",
        "brandPointOfView",
        "toneOfVoice",
        "authorPersona",
    }
    assert len(data["competitors"]["competitors"]) == 3
    assert data["scrapedData"]["metadata"]["truncated"] is False
    assert "createdAt" in data


@pytest.mark.parametrize("payload", [{}, {"url": ""}, {"url": "not-a-url"}])
def test_generate_brandkit_invalid_url(client, payload):
    response = client.post("/api/business/generate-brandkit", json=payload)

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["error"]["kind"] == "ValidationError"


def test_generate_brandkit_models_down(client, providers):
    providers["anthropic"].healthy = False
    providers["azure"].healthy = False

    response = client.post("/api/business/generate-brandkit", json={"url": "https://spoonity.com"})

    assert response.status_code == 503
    assert response.json()["error"]["kind"] == "ModelUnavailable"


def test_generate_brandkit_malformed_output(client, providers):
    providers["anthropic"].responses = {"brand_analysis": "no json here"}

    response = client.post("/api/business/generate-brandkit", json={"url": "https://spoonity.com"})

    assert response.status_code == 502
    assert response.json()["error"]["kind"] == "MalformedModelOutput"


# ==========================================
#  RESULTS AND RUNS
# ==========================================


def test_get_and_list_brandkits(client):
    created = client.post("/api/business/generate-brandkit", json={"url": "https://spoonity.com"}).json()
    result_id = created["data"]["id"]

    response = client.get(f"/api/business/brandkit/{result_id}")
    assert response.status_code == 200
    assert response.json()["data"]["id"] == result_id

    listing = client.get("/api/business/brandkits").json()["data"]
    assert [item["id"] for item in listing] == [result_id]
    assert listing[0]["url"] == "https://spoonity.com"


def test_get_brandkit_not_found(client):
    response = client.get("/api/business/brandkit/bkit_missing0000")
    assert response.status_code == 404
    assert response.json()["error"]["kind"] == "RunNotFound"


def test_list_brandkits_empty(client):
    response = client.get("/api/business/brandkits")
    assert response.status_code == 200
    assert response.json()["data"] == []


def test_get_run_and_artifact(client):
    created = client.post("/api/business/generate-brandkit", json={"url": "https://spoonity.com"}).json()
    run_id = created["data"]["id"]

    run = client.get(f"/api/business/runs/{run_id}").json()["data"]
    assert run["status"] == "succeeded"
    assert [s["name"] for s in run["steps"]] == [
        "acquisition",
        "brand_analysis",
        "competitor_analysis",
        "compile",
    ]

    artifact = client.get(f"/api/business/runs/{run_id}/artifact").json()["data"]
    assert artifact["truncated"] is False
    assert artifact["originalLength"] == artifact["processedLength"]
    assert artifact["originalReference"].startswith("content_")


def test_get_run_not_found(client):
    response = client.get("/api/business/runs/bkit_missing0000")
    assert response.status_code == 404


def test_artifact_of_failed_acquisition_is_not_found(client, settings):
    (settings.mock_data_dir / settings.mock_small_file).unlink()

    response = client.post("/api/business/generate-brandkit", json={"url": "https://spoonity.com"})
    assert response.status_code == 502
    assert response.json()["error"]["kind"] == "AcquisitionError"

    run_id = next(settings.runs_dir.glob("*.json")).stem
    run = client.get(f"/api/business/runs/{run_id}").json()["data"]
    assert run["status"] == "failed"

    artifact = client.get(f"/api/business/runs/{run_id}/artifact")
    assert artifact.status_code == 404


# ==========================================
#  CONTROLLER LIFECYCLE
# ==========================================


def test_controller_is_shared_across_requests(settings):
    request = SimpleNamespace(app=FastAPI())

    first = get_pipeline_controller(request, settings)
    second = get_pipeline_controller(request, settings)

    assert first is second
    assert request.app.state.pipeline_controller is first


@pytest.mark.asyncio
async def test_close_pipeline_controller_releases_router(settings):
    class ClosingRouter:
        closed = False

        async def aclose(self):
            self.closed = True

    router = ClosingRouter()
    test_app = FastAPI()
    test_app.state.pipeline_controller = PipelineController(settings, router=router)

    await close_pipeline_controller(test_app)
    await close_pipeline_controller(test_app)

    assert router.closed is True
    assert test_app.state.pipeline_controller is None


@pytest.mark.asyncio
async def test_close_without_controller_is_noop():
    await close_pipeline_controller(FastAPI())
