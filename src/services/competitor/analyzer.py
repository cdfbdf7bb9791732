"""Competitor analysis service."""

import logging

from pydantic import ValidationError as PydanticValidationError

from src.config.constants import ModelTask
from src.config.prompts import (
    build_competitor_analysis_system_prompt,
    build_competitor_analysis_user_input,
)
from src.infrastructure.llm.router import ModelGeneration, ModelRouter
from src.orchestrator.errors import MalformedModelOutput
from src.services.brand.models import BrandKit
from src.services.competitor.models import CompetitorAnalysis
from src.utils.json_parser import JSONParser

logger = logging.getLogger(__name__)


class CompetitorAnalyzer:
    """Identifies direct competitors from a BrandKit."""

    def __init__(self, router: ModelRouter, expected_count: int = 3):
        self.router = router
        self.expected_count = expected_count

    async def analyze(self, brand_kit: BrandKit, url: str) -> tuple[CompetitorAnalysis, ModelGeneration]:
        """
        Identify competitors for the brand behind ``url``.

        Raises:
            ModelUnavailable: If no model could serve the task
            MalformedModelOutput: If the response is not a competitor list
        """
        logger.info(f"Starting competitor analysis for {url}")
        generation = await self.router.generate(
            ModelTask.COMPETITOR_ANALYSIS.value,
            build_competitor_analysis_user_input(brand_kit, url, self.expected_count),
            system_prompt=build_competitor_analysis_system_prompt(self.expected_count),
        )
        data = JSONParser.extract_json(generation.content)
        if "competitors" not in data:
            raise MalformedModelOutput("Competitor response has no 'competitors' key")
        try:
            analysis = CompetitorAnalysis.model_validate(data)
        except PydanticValidationError as e:
            raise MalformedModelOutput(f"Competitor response has the wrong shape: {e}") from e

        if len(analysis.competitors) != self.expected_count:
            logger.warning(
                f"Expected {self.expected_count} competitors, got {len(analysis.competitors)}"
            )
        logger.info(f"Identified {len(analysis.competitors)} competitors")
        return analysis, generation
