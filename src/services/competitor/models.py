"""Competitor analysis models."""

from pydantic import BaseModel, ConfigDict, Field


class Competitor(BaseModel):
    """A single direct competitor."""

    model_config = ConfigDict(frozen=True)

    name: str
    url: str
    reason: str


class CompetitorAnalysis(BaseModel):
    """Competitor list produced by the competitor analysis step."""

    model_config = ConfigDict(frozen=True)

    competitors: list[Competitor] = Field(default_factory=list)
