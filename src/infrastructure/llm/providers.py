"""Model provider backends.

Each provider exposes the same two calls, ``health_check`` and ``generate``,
so the router can treat them interchangeably. SDK imports are lazy so the
app and tests load without every provider SDK configured.

Supports Anthropic (Claude via agent_framework, health via the anthropic SDK), Azure AI Foundry
(agent_framework) and OpenAI (openai SDK).
"""

import logging
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from src.config.constants import ProviderName
from src.config.settings import Settings

logger = logging.getLogger(__name__)

DEFAULT_INSTRUCTIONS = "You are a precise analyst. Answer with a single JSON object."
AZURE_AI_SCOPE = "https://ai.azure.com/.default"


@dataclass(frozen=True)
class GenerationRequest:
    """Provider-agnostic generation call."""

    model: str
    prompt: str
    system_prompt: str | None = None
    temperature: float = 0.1
    max_tokens: int = 3000
    json_output: bool = True
    label: str = ""


@runtime_checkable
class ModelProvider(Protocol):
    """Protocol for model provider implementations."""

    @property
    def name(self) -> str: ...

    async def health_check(self, model: str) -> bool: ...

    async def generate(self, request: GenerationRequest) -> str: ...


class AnthropicProvider:
    """Claude models through agent_framework's AnthropicClient."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self._client = None

    @property
    def name(self) -> str:
        return ProviderName.ANTHROPIC.value

    def _get_client(self):
        if self._client is None:
            import anthropic

            self._client = anthropic.AsyncAnthropic(api_key=self.settings.anthropic_api_key)
        return self._client

    async def health_check(self, model: str) -> bool:
        if not self.settings.anthropic_api_key:
            logger.warning("Anthropic provider unhealthy: anthropic_api_key is not set")
            return False
        if "claude" not in model.lower():
            logger.warning(f"Anthropic provider cannot serve non-Claude model '{model}'")
            return False
        # Raises (e.g. NotFoundError, APIConnectionError) when the model is not reachable
        await self._get_client().models.retrieve(model)
        return True

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None

    async def generate(self, request: GenerationRequest) -> str:
        from src.infrastructure.llm.executor import run_single_agent
        from src.infrastructure.llm.factory import create_anthropic_agent

        agent = create_anthropic_agent(
            settings=self.settings,
            name=request.label or "BrandKitAgent",
            instructions=request.system_prompt or DEFAULT_INSTRUCTIONS,
            model=request.model,
            max_tokens=request.max_tokens,
            temperature=request.temperature,
        )
        return await run_single_agent(agent, request.prompt, label=request.label)


class AzureAIProvider:
    """Azure AI Foundry deployments through agent_framework."""

    def __init__(self, settings: Settings):
        self.settings = settings

    @property
    def name(self) -> str:
        return ProviderName.AZURE.value

    async def health_check(self, model: str) -> bool:
        if not self.settings.azure_ai_project_endpoint:
            logger.warning("Azure provider unhealthy: azure_ai_project_endpoint is not set")
            return False
        if not model:
            return False
        from src.infrastructure.llm.factory import get_shared_credential

        # A token for the Foundry scope proves the credential chain and tenant are live
        token = await get_shared_credential().get_token(AZURE_AI_SCOPE)
        return bool(token.token)

    async def generate(self, request: GenerationRequest) -> str:
        from src.infrastructure.llm.executor import run_single_agent
        from src.infrastructure.llm.factory import azure_agent_client, build_agent, get_shared_credential

        credential = get_shared_credential()
        async with azure_agent_client(self.settings, request.model, credential) as client:
            agent = build_agent(
                client,
                name=request.label or "BrandKitAgent",
                instructions=request.system_prompt or DEFAULT_INSTRUCTIONS,
                max_tokens=request.max_tokens,
                temperature=request.temperature,
            )
            return await run_single_agent(agent, request.prompt, label=request.label)


class OpenAIProvider:
    """OpenAI chat completions, using JSON mode for structured output."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self._client = None

    @property
    def name(self) -> str:
        return ProviderName.OPENAI.value

    def _get_client(self):
        if self._client is None:
            from openai import AsyncOpenAI

            self._client = AsyncOpenAI(
                api_key=self.settings.openai_api_key,
                base_url=self.settings.openai_base_url,
            )
        return self._client

    async def health_check(self, model: str) -> bool:
        if not self.settings.openai_api_key:
            logger.warning("OpenAI provider unhealthy: openai_api_key is not set")
            return False
        await self._get_client().models.retrieve(model)
        return True

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None

    async def generate(self, request: GenerationRequest) -> str:
        messages = [
            {"role": "system", "content": request.system_prompt or DEFAULT_INSTRUCTIONS},
            {"role": "user", "content": request.prompt},
        ]
        kwargs = {
            "model": request.model,
            "messages": messages,
            "temperature": request.temperature,
            "max_tokens": request.max_tokens,
        }
        if request.json_output:
            kwargs["response_format"] = {"type": "json_object"}

        response = await self._get_client().chat.completions.create(**kwargs)
        return response.choices[0].message.content or ""


def build_providers(settings: Settings) -> dict[str, ModelProvider]:
    """Instantiate every known provider keyed by its identifier."""
    providers: list[ModelProvider] = [
        AnthropicProvider(settings),
        AzureAIProvider(settings),
        OpenAIProvider(settings),
    ]
    return {p.name: p for p in providers}
