"""Tests for mock website acquisition."""

import json

import pytest

from src.orchestrator.errors import AcquisitionError
from src.services.acquisition.scraper import ContentSource, MockScraper


@pytest.mark.parametrize(
    "url,expected",
    [
        ("https://spoonity.com", "spoonity-sample.json"),
        ("http://localhost:3000", "spoonity-sample.json"),
        ("https://www.SPOONITY.com/about", "spoonity-sample.json"),
        ("https://tapistro.com", "tapistro-sample.json"),
        ("https://example.org", "tapistro-sample.json"),
    ],
)
def test_select_file(settings, url, expected):
    assert MockScraper(settings).select_file(url).name == expected


def test_mock_scraper_is_a_content_source(settings):
    assert isinstance(MockScraper(settings), ContentSource)


@pytest.mark.asyncio
async def test_fetch_small_sample(settings):
    page = await MockScraper(settings).fetch("https://spoonity.com")

    assert page.url == "https://spoonity.com"
    assert page.title == "Spoonity"
    assert page.content.startswith("Spoonity loyalty platform.")
    assert page.metadata == {"description": "Loyalty", "keywords": "", "scrapedBy": "mock"}
    assert page.scraped_at is not None


@pytest.mark.asyncio
async def test_fetch_document_without_text_uses_json_dump(settings, tmp_path):
    data_dir = tmp_path / "alt"
    data_dir.mkdir()
    (data_dir / settings.mock_large_file).write_text(json.dumps([{"a": 1}]), encoding="utf-8")

    page = await MockScraper(settings, data_dir=data_dir).fetch("https://example.org")

    assert page.title == "Website Title"
    assert json.loads(page.content) == [{"a": 1}]


@pytest.mark.asyncio
async def test_fetch_missing_file_raises(settings, tmp_path):
    scraper = MockScraper(settings, data_dir=tmp_path / "empty")

    with pytest.raises(AcquisitionError, match="https://example.org"):
        await scraper.fetch("https://example.org")


@pytest.mark.asyncio
async def test_fetch_invalid_json_raises(settings):
    (settings.mock_data_dir / settings.mock_small_file).write_text("{not json", encoding="utf-8")

    with pytest.raises(AcquisitionError):
        await MockScraper(settings).fetch("https://spoonity.com")
