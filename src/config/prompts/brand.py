"""
Brand analysis prompts.
"""


def build_brand_analysis_system_prompt() -> str:
    """Build system prompt for the brand analysis agent."""

    return (
        "You are a brand strategy expert specializing in analyzing websites to create "
        "comprehensive brand kits. You extract key brand elements and positioning, identify the "
        "ideal customer profile, understand the brand's point of view and differentiation, and "
        "capture the tone of voice and author persona. "
        "Always answer with a single JSON object and nothing else."
    )


def build_brand_analysis_user_input(url: str, title: str | None, content: str) -> str:
    """Build the brand analysis request for a scraped website."""

    return f"""Analyze the following website content and create a comprehensive brand kit.

Website URL: {url}
Website Title: {title or "N/A"}

Content:
{content}

Based on this content, create a detailed brand kit with the following sections. Be specific and comprehensive:

1. About the Brand: Provide a detailed description of what the company does, their core offerings, unique selling points, mission, target market, and any key information about their operations, locations, or legal structure.

2. Ideal Customer Profile: Describe the ideal customer including their role/title, company type, size, industry, geographic location, primary needs, pain points, and what they value most in a solution.

3. Brand Point of View: Explain the brand's core beliefs, positioning, differentiation from competitors, and their vision for the future of their industry.

4. Tone of Voice: Describe the brand's communication style in a few words.

5. Author Persona: Describe the personality and communication approach used in the brand's content, including writing style, key terms they use, and how they engage with their audience.

Format your response as a JSON object with these exact keys:
{{
  "aboutTheBrand": "...",
  "idealCustomerProfile": "...",
  "brandPointOfView": "...",
  "toneOfVoice": "...",
  "authorPersona": "..."
}}"""
