"""Fake collaborators shared by the unit tests."""

import json

from src.infrastructure.llm.providers import GenerationRequest
from src.services.acquisition.models import ScrapedPage


BRAND_KIT_JSON = json.dumps(
    {
        "aboutTheBrand": "Spoonity is a loyalty and marketing platform for restaurants.",
        "idealCustomerProfile": "Multi-unit restaurant and cafe operators.",
        "brandPointOfView": "Repeat guests are the foundation of restaurant growth.",
        "toneOfVoice": "Practical, upbeat, partner-like.",
        "authorPersona": "A hospitality marketer who has run loyalty programs.",
    }
)

COMPETITORS_JSON = json.dumps(
    {
        "competitors": [
            {"name": "Punchh", "url": "https://punchh.com", "reason": "Restaurant loyalty platform"},
            {"name": "Thanx", "url": "https://thanx.com", "reason": "Guest engagement for restaurants"},
            {"name": "Paytronix", "url": "https://paytronix.com", "reason": "Loyalty and gift cards"},
        ]
    }
)

DEFAULT_RESPONSES = {
    "brand_analysis": BRAND_KIT_JSON,
    "competitor_analysis": COMPETITORS_JSON,
}


class FakeProvider:
    """In-memory ModelProvider that answers by task label."""

    def __init__(
        self,
        name: str,
        healthy: bool = True,
        responses: dict[str, str] | None = None,
        errors: list[Exception] | None = None,
    ):
        self._name = name
        self.healthy = healthy
        self.responses = DEFAULT_RESPONSES if responses is None else responses
        self.errors = list(errors or [])
        self.health_calls = 0
        self.requests: list[GenerationRequest] = []

    @property
    def name(self) -> str:
        return self._name

    async def health_check(self, model: str) -> bool:
        self.health_calls += 1
        return self.healthy

    async def generate(self, request: GenerationRequest) -> str:
        self.requests.append(request)
        if self.errors:
            raise self.errors.pop(0)
        return self.responses[request.label]


class FakeSource:
    """ContentSource serving fixed text for any URL."""

    def __init__(self, content: str, title: str = "Test Site"):
        self.content = content
        self.title = title
        self.calls: list[str] = []

    async def fetch(self, url: str) -> ScrapedPage:
        self.calls.append(url)
        return ScrapedPage(url=url, title=self.title, content=self.content, metadata={"scrapedBy": "test"})
