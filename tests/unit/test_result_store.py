"""Tests for result and run persistence."""

from datetime import UTC, datetime

import pytest

from src.config.constants import PipelineStatus
from src.infrastructure.storage.result_store import JSONFileStore, ResultStore, RunStore
from src.orchestrator.models import PipelineResult, PipelineRun
from src.services.acquisition.models import ScrapedData
from src.services.brand.models import BrandKit
from src.services.competitor.models import Competitor, CompetitorAnalysis


def _result(result_id: str, created_at: datetime) -> PipelineResult:
    return PipelineResult(
        id=result_id,
        url=f"https://{result_id}.example",
        brand_kit=BrandKit(
            about_the_brand="About",
            ideal_customer_profile="ICP",
            brand_point_of_view="POV",
            tone_of_voice="Friendly",
            author_persona="Persona",
        ),
        competitors=CompetitorAnalysis(
            competitors=[Competitor(name="Rival", url="https://rival.example", reason="Same market")]
        ),
        scraped_data=ScrapedData(
            url=f"https://{result_id}.example",
            title="Title",
            content="content",
            scraped_at=created_at,
        ),
        created_at=created_at,
    )


@pytest.mark.asyncio
async def test_result_is_saved_with_camel_case_keys(settings):
    store = ResultStore(settings)
    result = _result("bkit_aaaaaaaaaa", datetime(2025, 1, 1, tzinfo=UTC))

    path = await store.save(result)

    assert path == settings.results_dir / "bkit_aaaaaaaaaa.json"
    data = await store.get("bkit_aaaaaaaaaa")
    assert set(data) == {"id", "url", "brandKit", "competitors", "scrapedData", "createdAt"}
    assert data["brandKit"]["toneOfVoice"] == "Friendly"
    assert data["scrapedData"]["scrapedAt"].startswith("2025-01-01")


@pytest.mark.asyncio
async def test_get_unknown_result(settings):
    assert await ResultStore(settings).get("bkit_nothing000") is None


@pytest.mark.asyncio
async def test_delete_result(settings):
    store = ResultStore(settings)
    await store.save(_result("bkit_a", datetime(2026, 1, 1, tzinfo=UTC)))

    assert await store.delete("bkit_a") is True
    assert await store.get("bkit_a") is None
    assert await store.delete("bkit_a") is False


@pytest.mark.asyncio
async def test_list_summaries_newest_first(settings):
    store = ResultStore(settings)
    await store.save(_result("bkit_old0000000", datetime(2024, 1, 1, tzinfo=UTC)))
    await store.save(_result("bkit_new0000000", datetime(2025, 6, 1, tzinfo=UTC)))

    summaries = await store.list_summaries()

    assert [s["id"] for s in summaries] == ["bkit_new0000000", "bkit_old0000000"]
    assert set(summaries[0]) == {"id", "url", "createdAt"}


@pytest.mark.asyncio
async def test_list_skips_unreadable_documents(settings):
    store = ResultStore(settings)
    await store.save(_result("bkit_good000000", datetime(2025, 1, 1, tzinfo=UTC)))
    (settings.results_dir / "broken.json").write_text("{oops", encoding="utf-8")

    summaries = await store.list_summaries()

    assert [s["id"] for s in summaries] == ["bkit_good000000"]


@pytest.mark.asyncio
async def test_run_round_trip(settings):
    store = RunStore(settings)
    run = PipelineRun(id="bkit_run0000000", url="https://example.com", status=PipelineStatus.FAILED)
    run.error = {"kind": "ModelUnavailable", "message": "down"}

    await store.save(run)
    loaded = await store.get(run.id)

    assert loaded.status == PipelineStatus.FAILED
    assert loaded.error == run.error
    assert await store.get("bkit_unknown000") is None


@pytest.mark.parametrize("doc_id", ["../escape", "a/b", "", "id with spaces"])
def test_unsafe_ids_are_rejected(tmp_path, doc_id):
    with pytest.raises(ValueError):
        JSONFileStore(tmp_path)._path_for(doc_id)
