"""Main pipeline orchestrator."""

import logging
import secrets
import string
from typing import Any
from urllib.parse import urlparse

from src.config.constants import (
    RUN_ID_LENGTH,
    RUN_ID_PREFIX,
    PipelineStatus,
    PipelineStep,
    PipelineStepDescription,
)
from src.config.settings import Settings
from src.infrastructure.llm.router import ModelRouter
from src.infrastructure.logging.session_logger import SessionLogger
from src.infrastructure.storage.content_store import ContentStore
from src.infrastructure.storage.result_store import ResultStore, RunStore
from src.orchestrator.errors import MissingState, RunNotFound, ValidationError, error_payload
from src.orchestrator.models import PipelineResult, PipelineRun, utc_now
from src.orchestrator.state import RunState, SharedStateStore, StateKey
from src.orchestrator.step_executor import StepDefinition, StepExecutor
from src.services.acquisition.models import ScrapedData, ScrapedPage
from src.services.acquisition.scraper import ContentSource, MockScraper
from src.services.brand.analyzer import BrandAnalyzer
from src.services.brand.models import BrandKit
from src.services.competitor.analyzer import CompetitorAnalyzer
from src.services.competitor.models import CompetitorAnalysis
from src.services.content.models import ArtifactSummary, ContentArtifact
from src.services.content.policy import ContentPreservationPolicy

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.ascii_letters + string.digits + "_-"


def new_run_id() -> str:
    return RUN_ID_PREFIX + "".join(secrets.choice(_ID_ALPHABET) for _ in range(RUN_ID_LENGTH))


def validate_url(url: Any) -> str:
    """Normalize and check a target URL.

    Raises:
        ValidationError: If the URL is missing or not an absolute http(s) URL
    """
    if not isinstance(url, str) or not url.strip():
        raise ValidationError("URL is required")
    url = url.strip()
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValidationError(f"URL must be an absolute http(s) URL, got '{url}'")
    return url


class PipelineController:
    """Runs the fixed brand kit pipeline.

    Steps, strictly in order: acquisition, brand analysis, competitor analysis,
    compile. Each declares the state keys it needs and the keys it must
    produce; both are checked around every step.
    """

    def __init__(
        self,
        settings: Settings,
        source: ContentSource | None = None,
        router: ModelRouter | None = None,
        content_store: ContentStore | None = None,
        result_store: ResultStore | None = None,
        run_store: RunStore | None = None,
        state_store: SharedStateStore | None = None,
    ):
        """Initialize controller with settings and optional collaborators."""
        self.settings = settings
        self.source = source or MockScraper(settings)
        self.router = router or ModelRouter(settings)
        self.content_store = content_store or ContentStore(settings)
        self.result_store = result_store or ResultStore(settings)
        self.run_store = run_store or RunStore(settings)
        self.state_store = state_store or SharedStateStore()
        self.policy = ContentPreservationPolicy(settings, self.content_store)
        self.brand = BrandAnalyzer(self.router)
        self.competitor = CompetitorAnalyzer(self.router, settings.expected_competitor_count)
        self.executor = StepExecutor(settings)
        self.steps = self._declare_steps()
        self._runs: dict[str, PipelineRun] = {}
        self._urls: dict[str, str] = {}

    def _declare_steps(self) -> list[StepDefinition]:
        return [
            StepDefinition(
                name=PipelineStep.ACQUISITION,
                description=PipelineStepDescription.ACQUISITION.value,
                handler=self._step_acquisition,
                produces=(StateKey.SCRAPED_PAGE, StateKey.CONTENT_ARTIFACT),
            ),
            StepDefinition(
                name=PipelineStep.BRAND_ANALYSIS,
                description=PipelineStepDescription.BRAND_ANALYSIS.value,
                handler=self._step_brand_analysis,
                requires=(StateKey.SCRAPED_PAGE, StateKey.CONTENT_ARTIFACT),
                produces=(StateKey.BRAND_KIT,),
            ),
            StepDefinition(
                name=PipelineStep.COMPETITOR_ANALYSIS,
                description=PipelineStepDescription.COMPETITOR_ANALYSIS.value,
                handler=self._step_competitor_analysis,
                requires=(StateKey.BRAND_KIT,),
                produces=(StateKey.COMPETITORS,),
            ),
            StepDefinition(
                name=PipelineStep.COMPILE,
                description=PipelineStepDescription.COMPILE.value,
                handler=self._step_compile,
                requires=(
                    StateKey.SCRAPED_PAGE,
                    StateKey.CONTENT_ARTIFACT,
                    StateKey.BRAND_KIT,
                    StateKey.COMPETITORS,
                ),
                produces=(StateKey.RESULT,),
            ),
        ]

    async def _step_acquisition(self, state: RunState) -> dict[str, Any]:
        """Fetch the page and split it into original and processed tiers."""
        run_id = state.run_id
        url = self._urls[run_id]
        page = await self.source.fetch(url)
        artifact = await self.policy.preserve(page.content)

        state.set(StateKey.SCRAPED_PAGE, page)
        state.set(StateKey.CONTENT_ARTIFACT, artifact)

        summary = artifact.summary(self.settings.content_preview_chars)
        self._runs[run_id].artifact = summary
        return {
            "url": page.url,
            "title": page.title,
            **summary.model_dump(by_alias=True),
        }

    async def _step_brand_analysis(self, state: RunState) -> dict[str, Any]:
        page = state.require(StateKey.SCRAPED_PAGE, ScrapedPage)
        artifact = state.require(StateKey.CONTENT_ARTIFACT, ContentArtifact)

        brand_kit, generation = await self.brand.analyze(page.url, page.title, artifact.processed)
        state.set(StateKey.BRAND_KIT, brand_kit)
        return {
            "brandKitGenerated": True,
            "aboutBrand": brand_kit.about_the_brand[:100],
            "provider": generation.provider,
            "model": generation.model,
            "usedFallback": generation.used_fallback,
        }

    async def _step_competitor_analysis(self, state: RunState) -> dict[str, Any]:
        brand_kit = state.require(StateKey.BRAND_KIT, BrandKit)
        url = self._urls[state.run_id]

        analysis, generation = await self.competitor.analyze(brand_kit, url)
        state.set(StateKey.COMPETITORS, analysis)
        return {
            "competitorsFound": len(analysis.competitors),
            "firstCompetitor": analysis.competitors[0].name if analysis.competitors else None,
            "provider": generation.provider,
            "model": generation.model,
            "usedFallback": generation.used_fallback,
        }

    async def _step_compile(self, state: RunState) -> dict[str, Any]:
        page = state.require(StateKey.SCRAPED_PAGE, ScrapedPage)
        artifact = state.require(StateKey.CONTENT_ARTIFACT, ContentArtifact)
        brand_kit = state.require(StateKey.BRAND_KIT, BrandKit)
        competitors = state.require(StateKey.COMPETITORS, CompetitorAnalysis)

        scraped_data = ScrapedData(
            url=page.url,
            title=page.title,
            content=artifact.processed,
            metadata={
                **page.metadata,
                "originalLength": artifact.original_length,
                "processedLength": artifact.processed_length,
                "truncated": artifact.truncated,
                "originalReference": artifact.original_reference,
            },
            scraped_at=page.scraped_at,
        )
        result = PipelineResult(
            id=state.run_id,
            url=self._urls[state.run_id],
            brand_kit=brand_kit,
            competitors=competitors,
            scraped_data=scraped_data,
        )
        await self.result_store.save(result)
        state.set(StateKey.RESULT, result)
        return {"resultId": result.id, "competitors": len(competitors.competitors)}

    @staticmethod
    def _verify(state: RunState, keys: tuple[StateKey, ...], step: str, phase: str) -> None:
        missing = state.missing(keys)
        if missing:
            names = ", ".join(k.value for k in missing)
            raise MissingState(f"Step '{step}' {phase}: missing state {names}")

    async def _withdraw_result(self, run_id: str) -> None:
        """A failed run must not leave a published result behind."""
        try:
            if await self.result_store.delete(run_id):
                logger.warning(f"Withdrew result of failed run {run_id}")
        except Exception as e:
            logger.error(f"Could not withdraw result of failed run {run_id}: {e}")

    async def _run_steps(
        self,
        run: PipelineRun,
        state: RunState,
        steps: list[StepDefinition],
        session_logger: SessionLogger | None,
    ) -> None:
        for step in steps:
            self._verify(state, step.requires, step.name.value, "cannot start")
            await self.executor.execute(run, state, step, session_logger)
            self._verify(state, step.produces, step.name.value, "did not produce its output")
            await self.run_store.save(run)

    async def run(self, url: str, steps: list[StepDefinition] | None = None) -> PipelineResult:
        """
        Run the full pipeline for a URL.

        Args:
            url: Website URL to analyze
            steps: Override of the step sequence (defaults to the fixed one)

        Returns:
            The compiled PipelineResult

        Raises:
            PipelineError: The first error encountered; the run is marked failed
        """
        url = validate_url(url)
        run = PipelineRun(id=new_run_id(), url=url)
        state = self.state_store.init(run.id)
        self._runs[run.id] = run
        self._urls[run.id] = url

        session_logger = None
        if self.settings.session_logs_enabled:
            session_logger = SessionLogger(self.settings.session_logs_dir)
            session_logger.start_session(run.id, url)

        logger.info(f"Starting analysis {run.id} for {url}")
        try:
            run.status = PipelineStatus.RUNNING
            await self.run_store.save(run)

            await self._run_steps(run, state, steps if steps is not None else self.steps, session_logger)

            result = state.require(StateKey.RESULT, PipelineResult)
            run.status = PipelineStatus.SUCCEEDED
            run.result_id = result.id
            run.completed_at = utc_now()
            await self.run_store.save(run)
            if session_logger:
                session_logger.end_session(success=True)
            logger.info(f"Analysis {run.id} complete for {url}")
            return result

        except Exception as e:
            logger.error(f"Pipeline error in run {run.id}: {e}", exc_info=True)
            run.status = PipelineStatus.FAILED
            run.error = error_payload(e)
            run.result_id = None
            run.completed_at = utc_now()
            await self._withdraw_result(run.id)
            try:
                await self.run_store.save(run)
            except Exception as save_error:
                logger.error(f"Could not persist failed run {run.id}: {save_error}")
            if session_logger:
                session_logger.end_session(success=False, errors=[run.error["message"]])
            raise

        finally:
            self.state_store.clear(run.id)
            self._urls.pop(run.id, None)
            self._runs.pop(run.id, None)

    async def aclose(self) -> None:
        await self.router.aclose()

    async def get_run(self, run_id: str) -> PipelineRun:
        """
        Return the run record for ``run_id``.

        Raises:
            RunNotFound: If no such run was ever started
        """
        run = self._runs.get(run_id)
        if run is not None:
            return run
        try:
            stored = await self.run_store.get(run_id)
        except ValueError as e:
            raise RunNotFound(f"Run '{run_id}' not found") from e
        if stored is None:
            raise RunNotFound(f"Run '{run_id}' not found")
        return stored

    async def get_artifact_summary(self, run_id: str) -> ArtifactSummary:
        """
        Read-only view of the acquisition step's outcome.

        Raises:
            RunNotFound: If the run does not exist
            MissingState: If the run never completed acquisition
        """
        run = await self.get_run(run_id)
        if run.artifact is None:
            raise MissingState(f"Run '{run_id}' has no content artifact")
        return run.artifact

