"""Run, step and result records for the pipeline."""

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from src.config.constants import PipelineStatus, StepStatus
from src.services.acquisition.models import ScrapedData
from src.services.brand.models import BrandKit
from src.services.competitor.models import CompetitorAnalysis
from src.services.content.models import ArtifactSummary


def utc_now() -> datetime:
    return datetime.now(UTC)


class StepRecord(BaseModel):
    """History entry for one step. Frozen once finalized."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    name: str
    status: StepStatus = StepStatus.PENDING
    started_at: datetime | None = None
    ended_at: datetime | None = None
    duration_ms: float | None = None
    summary: dict[str, Any] = Field(default_factory=dict)
    error: dict[str, Any] | None = None

    @property
    def is_terminal(self) -> bool:
        return self.status in (StepStatus.SUCCEEDED, StepStatus.FAILED)


class PipelineRun(BaseModel):
    """Lifecycle record of one end-to-end run. Mutated only by the controller."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    url: str
    status: PipelineStatus = PipelineStatus.PENDING
    completed_steps: list[str] = Field(default_factory=list)
    steps: list[StepRecord] = Field(default_factory=list)
    artifact: ArtifactSummary | None = None
    result_id: str | None = None
    error: dict[str, Any] | None = None
    created_at: datetime = Field(default_factory=utc_now)
    completed_at: datetime | None = None

    def step(self, name: str) -> StepRecord | None:
        for record in self.steps:
            if record.name == name:
                return record
        return None

    def record_step(self, record: StepRecord) -> None:
        """Add or finalize the record for ``record.name``.

        A finalized record is never replaced.
        """
        for i, existing in enumerate(self.steps):
            if existing.name == record.name:
                if existing.is_terminal:
                    raise ValueError(f"Step '{record.name}' is already finalized")
                self.steps[i] = record
                return
        self.steps.append(record)

    @property
    def is_terminal(self) -> bool:
        return self.status in (PipelineStatus.SUCCEEDED, PipelineStatus.FAILED)


class PipelineResult(BaseModel):
    """Externally visible output of a successful run."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    url: str
    brand_kit: BrandKit
    competitors: CompetitorAnalysis
    scraped_data: ScrapedData
    created_at: datetime = Field(default_factory=utc_now)

    def to_json_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
