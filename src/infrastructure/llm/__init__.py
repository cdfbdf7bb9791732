"""LLM infrastructure module.

The agent_framework factory and executor are imported lazily by the
providers, so they are not re-exported here.
"""

from src.infrastructure.llm.providers import (
    AnthropicProvider,
    AzureAIProvider,
    GenerationRequest,
    ModelProvider,
    OpenAIProvider,
    build_providers,
)
from src.infrastructure.llm.router import (
    ModelGeneration,
    ModelRouter,
    ModelTarget,
    ModelTaskConfig,
    RoutingDecision,
    build_task_configs,
)

__all__ = [
    "AnthropicProvider",
    "AzureAIProvider",
    "GenerationRequest",
    "ModelProvider",
    "OpenAIProvider",
    "build_providers",
    "ModelGeneration",
    "ModelRouter",
    "ModelTarget",
    "ModelTaskConfig",
    "RoutingDecision",
    "build_task_configs",
]
