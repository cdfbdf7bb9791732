"""Brand analysis service."""

import logging

from pydantic import ValidationError as PydanticValidationError

from src.config.constants import ModelTask
from src.config.prompts import build_brand_analysis_system_prompt, build_brand_analysis_user_input
from src.infrastructure.llm.router import ModelGeneration, ModelRouter
from src.orchestrator.errors import MalformedModelOutput
from src.services.brand.models import BrandKit
from src.utils.json_parser import JSONParser

logger = logging.getLogger(__name__)


class BrandAnalyzer:
    """Turns processed website content into a BrandKit."""

    def __init__(self, router: ModelRouter):
        self.router = router

    async def analyze(self, url: str, title: str | None, content: str) -> tuple[BrandKit, ModelGeneration]:
        """
        Generate a brand kit for a website.

        Args:
            url: Website URL
            title: Website title, if known
            content: Processed (budget-capped) website content

        Returns:
            The parsed brand kit and the generation that produced it

        Raises:
            ModelUnavailable: If no model could serve the task
            MalformedModelOutput: If the response is not a valid brand kit
        """
        logger.info(f"Processing {len(content)} characters for brand analysis of {url}")
        generation = await self.router.generate(
            ModelTask.BRAND_ANALYSIS.value,
            build_brand_analysis_user_input(url, title, content),
            system_prompt=build_brand_analysis_system_prompt(),
        )
        data = JSONParser.extract_json(generation.content)
        try:
            brand_kit = BrandKit.model_validate(data)
        except PydanticValidationError as e:
            raise MalformedModelOutput(f"Brand kit response has the wrong shape: {e}") from e

        logger.info(f"Brand kit generated by {generation.provider}/{generation.model}")
        return brand_kit, generation
