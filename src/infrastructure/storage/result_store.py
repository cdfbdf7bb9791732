"""JSON file persistence for pipeline results and run records."""

import asyncio
import json
import logging
import re
from pathlib import Path
from typing import Any

from src.config.settings import Settings
from src.orchestrator.models import PipelineResult, PipelineRun

logger = logging.getLogger(__name__)

_SAFE_ID = re.compile(r"^[A-Za-z0-9_-]+$")


class JSONFileStore:
    """One JSON document per id inside a directory."""

    def __init__(self, directory: Path, timeout: float = 30.0):
        self.directory = Path(directory)
        self.timeout = timeout

    def _path_for(self, doc_id: str) -> Path:
        if not _SAFE_ID.match(doc_id):
            raise ValueError(f"Invalid document id: {doc_id!r}")
        return self.directory / f"{doc_id}.json"

    def _write(self, doc_id: str, data: dict[str, Any]) -> Path:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._path_for(doc_id)
        tmp = path.with_suffix(".json.tmp")
        tmp.write_text(json.dumps(data, indent=2, ensure_ascii=False, default=str), encoding="utf-8")
        tmp.replace(path)
        return path

    def _read(self, doc_id: str) -> dict[str, Any] | None:
        path = self._path_for(doc_id)
        if not path.is_file():
            return None
        return json.loads(path.read_text(encoding="utf-8"))

    def _delete(self, doc_id: str) -> bool:
        path = self._path_for(doc_id)
        if not path.is_file():
            return False
        path.unlink()
        return True

    def _list(self) -> list[dict[str, Any]]:
        if not self.directory.is_dir():
            return []
        documents = []
        for path in sorted(self.directory.glob("*.json")):
            try:
                documents.append(json.loads(path.read_text(encoding="utf-8")))
            except (OSError, json.JSONDecodeError) as e:
                logger.warning(f"Skipping unreadable document {path.name}: {e}")
        return documents

    async def save(self, doc_id: str, data: dict[str, Any]) -> Path:
        return await asyncio.wait_for(asyncio.to_thread(self._write, doc_id, data), timeout=self.timeout)

    async def load(self, doc_id: str) -> dict[str, Any] | None:
        return await asyncio.wait_for(asyncio.to_thread(self._read, doc_id), timeout=self.timeout)

    async def list(self) -> list[dict[str, Any]]:
        return await asyncio.wait_for(asyncio.to_thread(self._list), timeout=self.timeout)

    async def delete(self, doc_id: str) -> bool:
        return await asyncio.wait_for(asyncio.to_thread(self._delete, doc_id), timeout=self.timeout)


class ResultStore:
    """Stores PipelineResults under ``results/{id}.json``."""

    def __init__(self, settings: Settings, directory: Path | None = None):
        self._files = JSONFileStore(directory or settings.results_dir, settings.storage_timeout)

    async def save(self, result: PipelineResult) -> Path:
        path = await self._files.save(result.id, result.to_json_dict())
        logger.info(f"Saved result to {path}")
        return path

    async def get(self, result_id: str) -> dict[str, Any] | None:
        """Stored result JSON, or None if unknown."""
        return await self._files.load(result_id)

    async def delete(self, result_id: str) -> bool:
        """Withdraw a stored result. Returns False if there was none."""
        return await self._files.delete(result_id)

    async def list_summaries(self) -> list[dict[str, Any]]:
        """``{id, url, createdAt}`` for every stored result, newest first."""
        summaries = [
            {"id": doc.get("id"), "url": doc.get("url"), "createdAt": doc.get("createdAt")}
            for doc in await self._files.list()
        ]
        return sorted(summaries, key=lambda s: s["createdAt"] or "", reverse=True)


class RunStore:
    """Stores PipelineRun records under ``runs/{id}.json``."""

    def __init__(self, settings: Settings, directory: Path | None = None):
        self._files = JSONFileStore(directory or settings.runs_dir, settings.storage_timeout)

    async def save(self, run: PipelineRun) -> None:
        await self._files.save(run.id, run.model_dump(mode="json", by_alias=True))

    async def get(self, run_id: str) -> PipelineRun | None:
        data = await self._files.load(run_id)
        return PipelineRun.model_validate(data) if data is not None else None
