"""
Competitor analysis prompts.
"""

from src.services.brand.models import BrandKit


def build_competitor_analysis_system_prompt(count: int = 3) -> str:
    """Build system prompt for the competitor intelligence agent."""

    return (
        "You are a competitive intelligence expert specializing in identifying and analyzing "
        f"direct competitors. Identify {count} real companies that serve the same customer "
        "segments, offer similar products or services, would compete for the same contracts or "
        "customers, and have similar positioning or value propositions. "
        "Always answer with a single JSON object and nothing else."
    )


def build_competitor_analysis_user_input(brand_kit: BrandKit, url: str, count: int = 3) -> str:
    """Build the competitor analysis request from a brand kit."""

    return f"""Based on the following brand kit, identify {count} direct competitors.

Original URL: {url}

Brand Kit Information:
- About the Brand: {brand_kit.about_the_brand}
- Ideal Customer Profile: {brand_kit.ideal_customer_profile}
- Brand Point of View: {brand_kit.brand_point_of_view}
- Tone of Voice: {brand_kit.tone_of_voice}
- Author Persona: {brand_kit.author_persona}

Based on this brand profile, identify {count} companies that:
1. Serve the same or very similar customer segments
2. Offer comparable products or services
3. Operate in the same market space
4. Would be considered direct alternatives by customers

For each competitor, provide:
- Company name
- Their website URL (make sure it's a real, valid URL)
- A detailed reason explaining why they are a close competitor, including specific similarities in offerings, target market, and positioning

Think about companies that would appear in the same RFP, pitch against each other for the same clients, or be evaluated side-by-side by potential customers.

Format your response as a JSON object:
{{
  "competitors": [
    {{
      "name": "Company Name",
      "url": "https://example.com",
      "reason": "Detailed explanation of why this is a close competitor..."
    }}
  ]
}}"""
