"""Prompts for the brand kit pipeline's model-backed steps."""

from src.config.prompts.brand import build_brand_analysis_system_prompt, build_brand_analysis_user_input
from src.config.prompts.competitor import (
    build_competitor_analysis_system_prompt,
    build_competitor_analysis_user_input,
)

__all__ = [
    "build_brand_analysis_system_prompt",
    "build_brand_analysis_user_input",
    "build_competitor_analysis_system_prompt",
    "build_competitor_analysis_user_input",
]
