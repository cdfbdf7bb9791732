"""Website content acquisition backed by local mock documents."""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from src.config.settings import Settings
from src.orchestrator.errors import AcquisitionError
from src.services.acquisition.models import ScrapedPage

logger = logging.getLogger(__name__)

_SMALL_SAMPLE_MARKERS = ("spoonity", "localhost")


@runtime_checkable
class ContentSource(Protocol):
    """Anything that can turn a URL into a ScrapedPage."""

    async def fetch(self, url: str) -> ScrapedPage: ...


class MockScraper:
    """Serves pre-scraped JSON documents instead of hitting the network.

    URLs containing ``spoonity`` or ``localhost`` get the small sample, every
    other URL gets the large one.
    """

    def __init__(self, settings: Settings, data_dir: Path | None = None):
        self.settings = settings
        self.data_dir = Path(data_dir) if data_dir else settings.mock_data_dir

    def select_file(self, url: str) -> Path:
        lowered = url.lower()
        if any(marker in lowered for marker in _SMALL_SAMPLE_MARKERS):
            name = self.settings.mock_small_file
        else:
            name = self.settings.mock_large_file
        return self.data_dir / name

    @staticmethod
    def _to_page(url: str, raw: Any) -> ScrapedPage:
        if isinstance(raw, dict):
            content = raw.get("text") or raw.get("content") or json.dumps(raw, ensure_ascii=False)
            title = raw.get("title") or "Website Title"
            description = raw.get("description") or ""
            keywords = raw.get("keywords") or ""
        else:
            content = json.dumps(raw, ensure_ascii=False)
            title, description, keywords = "Website Title", "", ""
        return ScrapedPage(
            url=url,
            title=title,
            content=content,
            metadata={"description": description, "keywords": keywords, "scrapedBy": "mock"},
        )

    def _load(self, path: Path) -> Any:
        with open(path, encoding="utf-8") as f:
            return json.load(f)

    async def fetch(self, url: str) -> ScrapedPage:
        """
        Load the mock document for ``url``.

        Raises:
            AcquisitionError: If the document is missing, unreadable or times out
        """
        path = self.select_file(url)
        logger.info(f"Using mock document {path.name} for {url}")
        try:
            raw = await asyncio.wait_for(
                asyncio.to_thread(self._load, path),
                timeout=self.settings.acquisition_timeout,
            )
        except (OSError, json.JSONDecodeError, TimeoutError) as e:
            logger.error(f"Failed to load mock document {path}: {e}")
            raise AcquisitionError(f"Failed to scrape {url}: {e or type(e).__name__}") from e

        page = self._to_page(url, raw)
        logger.info(f"Scraped {len(page.content)} characters from {url}")
        return page
