"""Dual-tier content preservation.

The original text is always persisted in full before anything is cut. Only
the processed tier, a leading prefix capped at the character budget, is handed
to the model-backed steps. The budget comes from a token ceiling and a fixed
chars-per-token ratio, so it bounds token count with high likelihood rather
than exactly.
"""

import logging

from src.config.settings import Settings
from src.infrastructure.storage.content_store import ContentStore
from src.orchestrator.errors import AcquisitionError
from src.services.content.models import ContentArtifact

logger = logging.getLogger(__name__)


def char_budget(max_input_tokens: int, chars_per_token: float) -> int:
    """Character ceiling for a model input token limit."""
    if max_input_tokens <= 0 or chars_per_token <= 0:
        raise ValueError("max_input_tokens and chars_per_token must be positive")
    return int(max_input_tokens * chars_per_token)


def truncate_to_budget(text: str, budget: int) -> tuple[str, bool]:
    """Keep the leading ``budget`` characters of ``text``.

    Returns:
        (processed text, whether anything was dropped)
    """
    if budget < 0:
        raise ValueError(f"budget must be non-negative, got {budget}")
    if len(text) <= budget:
        return text, False
    return text[:budget], True


class ContentPreservationPolicy:
    """Produces ContentArtifacts under a character budget."""

    def __init__(self, settings: Settings, store: ContentStore, budget: int | None = None):
        self.settings = settings
        self.store = store
        self.budget = (
            budget
            if budget is not None
            else char_budget(settings.content_max_input_tokens, settings.content_chars_per_token)
        )

    async def preserve(self, text: str) -> ContentArtifact:
        """
        Persist the original text, then derive the processed tier.

        Raises:
            AcquisitionError: If the original copy cannot be persisted
        """
        try:
            reference = await self.store.save(text)
        except Exception as e:
            logger.error(f"Failed to persist original content: {e}", exc_info=True)
            raise AcquisitionError(
                f"Failed to persist original content: {e or type(e).__name__}"
            ) from e

        processed, truncated = truncate_to_budget(text, self.budget)
        if truncated:
            logger.warning(
                f"Content truncated from {len(text)} to {len(processed)} chars "
                f"(budget {self.budget}); original kept at {reference}"
            )
        else:
            logger.info(f"Content within budget: {len(text)}/{self.budget} chars")

        return ContentArtifact(
            original=text,
            processed=processed,
            original_length=len(text),
            processed_length=len(processed),
            truncated=truncated,
            budget=self.budget,
            original_reference=reference,
        )
