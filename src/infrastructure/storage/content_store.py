"""Local file store for original (untruncated) website content."""

import asyncio
import logging
import secrets
from datetime import UTC, datetime
from pathlib import Path

from src.config.settings import Settings

logger = logging.getLogger(__name__)


class ContentStore:
    """Stores each original content copy in its own file.

    References are file names relative to the store directory, of the form
    ``content_{random}_{timestamp}.txt``. There is no size ceiling.
    """

    def __init__(self, settings: Settings, base_dir: Path | None = None):
        """Initialize content store.

        Args:
            settings: Application settings (content_dir, storage_timeout)
            base_dir: Optional directory override
        """
        self.settings = settings
        self.base_dir = Path(base_dir) if base_dir else settings.content_dir

    @staticmethod
    def new_reference() -> str:
        """Generate a unique reference with a random id and a UTC timestamp."""
        timestamp = datetime.now(UTC).strftime("%Y%m%dT%H%M%S%fZ")
        return f"content_{secrets.token_hex(6)}_{timestamp}.txt"

    def _path_for(self, reference: str) -> Path:
        path = (self.base_dir / reference).resolve()
        if path.parent != self.base_dir.resolve():
            raise ValueError(f"Invalid content reference: {reference!r}")
        return path

    def _write(self, reference: str, content: str) -> None:
        self.base_dir.mkdir(parents=True, exist_ok=True)
        self._path_for(reference).write_bytes(content.encode("utf-8"))

    async def save(self, content: str) -> str:
        """
        Persist ``content`` unmodified and return its reference.

        Raises:
            OSError: If the write fails
            TimeoutError: If the write exceeds settings.storage_timeout
        """
        reference = self.new_reference()
        await asyncio.wait_for(
            asyncio.to_thread(self._write, reference, content),
            timeout=self.settings.storage_timeout,
        )
        logger.info(f"Stored original content ({len(content)} chars) as {reference}")
        return reference

    def _read(self, reference: str) -> str:
        return self._path_for(reference).read_bytes().decode("utf-8")

    async def read(self, reference: str) -> str:
        """Read back a stored original copy, byte for byte.

        Raises:
            FileNotFoundError: If the reference does not exist
        """
        return await asyncio.wait_for(
            asyncio.to_thread(self._read, reference),
            timeout=self.settings.storage_timeout,
        )

    def exists(self, reference: str) -> bool:
        return self._path_for(reference).is_file()
