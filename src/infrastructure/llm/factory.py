"""agent_framework client and agent construction for the model providers."""

import logging
from contextlib import asynccontextmanager
from typing import Any

from agent_framework.anthropic import AnthropicClient
from agent_framework_azure_ai import AzureAIAgentClient
from azure.identity.aio import DefaultAzureCredential

from src.config.settings import Settings

logger = logging.getLogger(__name__)

_shared_credential: DefaultAzureCredential | None = None


def get_shared_credential() -> DefaultAzureCredential:
    """Process-wide Azure credential, created on first use."""
    global _shared_credential
    if _shared_credential is None:
        _shared_credential = DefaultAzureCredential()
    return _shared_credential


async def close_shared_credential() -> None:
    """Release the shared credential. Called from the app shutdown hook."""
    global _shared_credential
    if _shared_credential is None:
        return
    await _shared_credential.close()
    _shared_credential = None


@asynccontextmanager
async def azure_agent_client(settings: Settings, deployment: str, credential: DefaultAzureCredential):
    """
    Azure AI Foundry client bound to one model deployment.

    Args:
        settings: Application settings (azure_ai_project_endpoint)
        deployment: Deployment name in the Foundry project, e.g. ``gpt-4.1``
        credential: Async Azure credential
    """
    async with AzureAIAgentClient(
        project_endpoint=settings.azure_ai_project_endpoint,
        model_deployment_name=deployment,
        async_credential=credential,
    ) as client:
        yield client


def build_agent(client: Any, name: str, instructions: str, max_tokens: int, temperature: float) -> Any:
    """Create a tool-less agent that answers a single analysis prompt."""
    logger.debug(f"Creating agent '{name}' (max_tokens={max_tokens}, temperature={temperature})")
    return client.create_agent(
        name=name,
        instructions=instructions,
        max_tokens=max_tokens,
        temperature=temperature,
    )


def create_anthropic_agent(
    settings: Settings,
    name: str,
    instructions: str,
    model: str,
    max_tokens: int = 3000,
    temperature: float = 0.1,
) -> Any:
    """Claude agent for brand and competitor analysis."""
    client = AnthropicClient(model_id=model, api_key=settings.anthropic_api_key)
    return build_agent(client, name, instructions, max_tokens, temperature)
