"""Model routing with primary/fallback failover.

Every task is served the same way: health-check the primary target, invoke it
if healthy, otherwise (or on invocation error) do the same with the fallback.
When both fail the task raises ModelUnavailable and nothing partial is
returned. Health checks and generation calls are retried a bounded number of
times and each attempt carries its own timeout.
"""

import asyncio
import logging
import time
from collections import deque
from dataclasses import dataclass, field
from datetime import UTC, datetime

from src.config.constants import ModelTask
from src.config.settings import Settings
from src.infrastructure.llm.providers import GenerationRequest, ModelProvider, build_providers
from src.orchestrator.errors import ModelUnavailable
from src.utils.retry import is_transient_error, run_with_retry

logger = logging.getLogger(__name__)

ROLE_PRIMARY = "primary"
ROLE_FALLBACK = "fallback"

# Decisions kept for served_by and debugging; older ones are dropped
MAX_ROUTING_DECISIONS = 500


@dataclass(frozen=True)
class ModelTarget:
    """A provider identifier plus the model it should serve."""

    provider: str
    model: str

    def __str__(self) -> str:
        return f"{self.provider}/{self.model}"


@dataclass(frozen=True)
class ModelTaskConfig:
    """Static routing configuration for a named task."""

    task: str
    primary: ModelTarget
    fallback: ModelTarget
    temperature: float = 0.1
    max_output_tokens: int = 3000

    def targets(self) -> tuple[tuple[str, ModelTarget], ...]:
        return ((ROLE_PRIMARY, self.primary), (ROLE_FALLBACK, self.fallback))


@dataclass(frozen=True)
class ModelGeneration:
    """A successful generation and who served it."""

    content: str
    task: str
    provider: str
    model: str
    used_fallback: bool
    duration_ms: float


@dataclass(frozen=True)
class RoutingDecision:
    """One observable routing step (health check or invocation outcome)."""

    task: str
    provider: str
    model: str
    role: str
    outcome: str  # healthy | unhealthy | succeeded | failed
    detail: str = ""
    timestamp: str = field(default_factory=lambda: datetime.now(UTC).isoformat())


def build_task_configs(settings: Settings) -> dict[str, ModelTaskConfig]:
    """Build the routing table for every model task from settings."""
    configs = {}
    for task in ModelTask:
        prefix = task.value
        configs[task.value] = ModelTaskConfig(
            task=task.value,
            primary=ModelTarget(
                getattr(settings, f"{prefix}_primary_provider"),
                getattr(settings, f"{prefix}_primary_model"),
            ),
            fallback=ModelTarget(
                getattr(settings, f"{prefix}_fallback_provider"),
                getattr(settings, f"{prefix}_fallback_model"),
            ),
            temperature=getattr(settings, f"{prefix}_temperature"),
            max_output_tokens=getattr(settings, f"{prefix}_max_tokens"),
        )
    return configs


class _Unhealthy(Exception):
    """Raised inside the health-check retry loop for a negative answer."""


class ModelRouter:
    """Resolves a provider + model for each task with failover."""

    def __init__(
        self,
        settings: Settings,
        providers: dict[str, ModelProvider] | None = None,
        task_configs: dict[str, ModelTaskConfig] | None = None,
    ):
        self.settings = settings
        self.providers = providers if providers is not None else build_providers(settings)
        self.task_configs = task_configs if task_configs is not None else build_task_configs(settings)
        self.decisions: deque[RoutingDecision] = deque(maxlen=MAX_ROUTING_DECISIONS)
        self._healthy_until: dict[ModelTarget, float] = {}

    def config_for(self, task: str) -> ModelTaskConfig:
        config = self.task_configs.get(task)
        if config is None:
            raise ModelUnavailable(f"No model configuration for task '{task}'")
        return config

    def _record(self, task: str, target: ModelTarget, role: str, outcome: str, detail: str = "") -> None:
        decision = RoutingDecision(
            task=task,
            provider=target.provider,
            model=target.model,
            role=role,
            outcome=outcome,
            detail=detail,
        )
        self.decisions.append(decision)
        log = logger.info if outcome in ("healthy", "succeeded") else logger.warning
        log(f"[{task}] {role} {target}: {outcome}{f' ({detail})' if detail else ''}")

    async def _is_healthy(self, task: str, role: str, target: ModelTarget, provider: ModelProvider) -> bool:
        ttl = self.settings.model_health_cache_ttl
        if ttl > 0 and self._healthy_until.get(target, 0.0) > time.monotonic():
            self._record(task, target, role, "healthy", "cached")
            return True

        async def _check() -> bool:
            healthy = await asyncio.wait_for(
                provider.health_check(target.model),
                timeout=self.settings.model_health_timeout,
            )
            if not healthy:
                raise _Unhealthy("health check returned unhealthy")
            return True

        try:
            await run_with_retry(
                _check,
                max_retries=self.settings.model_max_attempts,
                initial_delay=self.settings.model_retry_delay,
                backoff_factor=self.settings.retry_backoff_factor,
                retry_if=lambda e: True,
                max_delay=self.settings.model_health_timeout,
                label=f"{task}:{role}:health",
            )
        except Exception as e:
            self._record(task, target, role, "unhealthy", str(e) or type(e).__name__)
            return False

        if ttl > 0:
            self._healthy_until[target] = time.monotonic() + ttl
        self._record(task, target, role, "healthy")
        return True

    async def _invoke(self, provider: ModelProvider, request: GenerationRequest, label: str) -> str:
        async def _call() -> str:
            return await asyncio.wait_for(
                provider.generate(request),
                timeout=self.settings.model_timeout,
            )

        return await run_with_retry(
            _call,
            max_retries=self.settings.model_max_attempts,
            initial_delay=self.settings.model_retry_delay,
            backoff_factor=self.settings.retry_backoff_factor,
            retry_if=is_transient_error,
            max_delay=self.settings.model_timeout,
            label=label,
        )

    async def generate(
        self,
        task: str,
        prompt: str,
        system_prompt: str | None = None,
    ) -> ModelGeneration:
        """
        Generate a response for ``task``, failing over to the fallback target.

        Raises:
            ModelUnavailable: If neither the primary nor the fallback succeeds
        """
        config = self.config_for(task)
        failures: list[str] = []

        for role, target in config.targets():
            provider = self.providers.get(target.provider)
            if provider is None:
                self._record(task, target, role, "unhealthy", "unknown provider")
                failures.append(f"{role} {target}: unknown provider")
                continue

            if not await self._is_healthy(task, role, target, provider):
                failures.append(f"{role} {target}: health check failed")
                continue

            request = GenerationRequest(
                model=target.model,
                prompt=prompt,
                system_prompt=system_prompt,
                temperature=config.temperature,
                max_tokens=config.max_output_tokens,
                label=task,
            )
            start = time.time()
            try:
                content = await self._invoke(provider, request, label=f"{task}:{role}")
            except Exception as e:
                self._healthy_until.pop(target, None)
                self._record(task, target, role, "failed", str(e) or type(e).__name__)
                failures.append(f"{role} {target}: {e or type(e).__name__}")
                continue

            duration_ms = (time.time() - start) * 1000
            self._record(task, target, role, "succeeded", f"{duration_ms:.0f} ms")
            return ModelGeneration(
                content=content,
                task=task,
                provider=target.provider,
                model=target.model,
                used_fallback=role == ROLE_FALLBACK,
                duration_ms=duration_ms,
            )

        raise ModelUnavailable(f"No model available for task '{task}': " + "; ".join(failures))

    def served_by(self, task: str) -> RoutingDecision | None:
        """The most recent successful decision for ``task``, if any."""
        for decision in reversed(self.decisions):
            if decision.task == task and decision.outcome == "succeeded":
                return decision
        return None

    async def aclose(self) -> None:
        """Release SDK clients held by the providers."""
        for name, provider in self.providers.items():
            close = getattr(provider, "aclose", None)
            if close is None:
                continue
            try:
                await close()
            except Exception as e:
                logger.warning(f"Error closing provider {name}: {e}")
