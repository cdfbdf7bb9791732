"""Content preservation models."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ArtifactSummary(BaseModel):
    """Small, caller-safe view of a ContentArtifact."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    original_length: int
    processed_length: int
    truncated: bool
    budget: int
    original_reference: str
    preview: str


class ContentArtifact(BaseModel):
    """Original and processed representations of the same source text."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    original: str = Field(exclude=True, repr=False)
    processed: str = Field(repr=False)
    original_length: int
    processed_length: int
    truncated: bool
    budget: int
    original_reference: str

    def summary(self, preview_chars: int = 500) -> ArtifactSummary:
        preview = self.processed[:preview_chars]
        if self.processed_length > preview_chars:
            preview += "..."
        return ArtifactSummary(
            original_length=self.original_length,
            processed_length=self.processed_length,
            truncated=self.truncated,
            budget=self.budget,
            original_reference=self.original_reference,
            preview=preview,
        )
