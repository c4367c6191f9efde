"""Core orchestration: gather signals from providers and correlate campaigns."""

import logging
import threading
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from typing import Mapping, Optional, Sequence

from campaign_correlator.config.loader import get_knowledge_base
from campaign_correlator.config.settings import Settings, get_settings
from campaign_correlator.engine.builder import CampaignBuilder, Clock
from campaign_correlator.engine.correlation import CorrelationEngine
from campaign_correlator.engine.overlaps import find_infra_overlaps
from campaign_correlator.engine.randomizers import RandomSource
from campaign_correlator.engine.scoring import summarize
from campaign_correlator.engine.timeline import build_timeline
from campaign_correlator.models.correlation import CorrelationResult
from campaign_correlator.models.family import FamilyProfile
from campaign_correlator.models.signals import (
    InfrastructureNode,
    MalwareSampleSignal,
    ProviderResult,
)
from campaign_correlator.providers import get_providers, merge_provider_results
from campaign_correlator.providers.base import BaseProvider, RequestContext

logger = logging.getLogger(__name__)

# Longest wait between checks of the cancel flag while providers run
CANCEL_POLL_INTERVAL = 0.05


class CorrelationOrchestrator:
    """Runs the gathering phase and the correlation engine for one query at a time."""

    def __init__(
        self,
        settings: Settings,
        providers: Optional[Sequence[BaseProvider]] = None,
        families: Optional[Mapping[str, FamilyProfile]] = None,
        randomizer: Optional[RandomSource] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        """
        Initialize correlation orchestrator.

        Args:
            settings: Application settings
            providers: Optional provider adapters (built from settings if None)
            families: Optional knowledge base (process-wide table if None)
            randomizer: Optional RandomSource for ids and codenames
            clock: Optional callable returning the current aware datetime
        """
        self.settings = settings
        self.families = (
            families if families is not None else get_knowledge_base(settings.knowledge_base_file)
        )
        self.providers = list(providers) if providers is not None else get_providers(
            settings, self.families
        )
        self.builder = CampaignBuilder(self.families, randomizer, clock)
        self.engine = CorrelationEngine()

    def gather(self, query: str, context: RequestContext) -> ProviderResult:
        """
        Query every provider concurrently and merge what comes back.

        Returns as soon as every provider has answered, the deadline passes, or
        the context is cancelled. Providers that fail, get cancelled, or are
        still running at that point contribute an empty result; nothing raised
        by a provider reaches the caller.

        A request already in flight is not interrupted. Its thread can outlive
        this call by at most the HTTP timeout it started with, which is
        ``settings.request_timeout`` capped by the time left before the
        deadline. Its result is discarded.

        Args:
            query: Free-text indicator
            context: Request deadline and cancellation flag

        Returns:
            Merged signal pool
        """
        if not self.providers:
            return ProviderResult()

        executor = ThreadPoolExecutor(
            max_workers=min(self.settings.max_workers, len(self.providers)),
            thread_name_prefix="provider",
        )
        try:
            futures = [
                executor.submit(provider.search, query, context) for provider in self.providers
            ]
            pending = set(futures)
            while pending and not context.cancelled:
                remaining = context.remaining()
                interval = (
                    CANCEL_POLL_INTERVAL if remaining is None
                    else min(CANCEL_POLL_INTERVAL, remaining)
                )
                _, pending = wait(pending, timeout=interval, return_when=FIRST_COMPLETED)

            if pending:
                reason = "cancelled" if context.cancel_event.is_set() else "deadline passed"
                logger.warning(
                    f"Gathering stopped ({reason}) with {len(pending)} provider(s) "
                    f"still running; continuing with partial results"
                )
                # Drop queued tasks before waking workers blocked on the cancel flag
                for future in pending:
                    future.cancel()
                context.cancel()

            results = [self._result_of(future) for future in futures if future not in pending]
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        return merge_provider_results(results)

    @staticmethod
    def _result_of(future: "Future[ProviderResult]") -> ProviderResult:
        if future.cancelled():
            return ProviderResult()
        error = future.exception()
        if error is not None:
            logger.error(f"Provider task failed: {error}")
            return ProviderResult()
        return future.result()

    def correlate_signals(
        self,
        samples: Sequence[MalwareSampleSignal],
        infrastructure: Sequence[InfrastructureNode],
    ) -> CorrelationResult:
        """
        Run the correlation engine over an already-gathered signal pool.

        Args:
            samples: Sample signals
            infrastructure: Infrastructure nodes

        Returns:
            Fully populated CorrelationResult (empty when there are no samples)
        """
        campaigns = self.builder.build(samples, infrastructure)
        correlations = self.engine.correlate(campaigns)

        return CorrelationResult(
            campaigns=campaigns,
            correlations=correlations,
            infra_overlaps=find_infra_overlaps(infrastructure, campaigns),
            timeline=build_timeline(campaigns),
            stats=summarize(campaigns, correlations),
        )

    def correlate(
        self,
        query: str,
        timeout: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> CorrelationResult:
        """
        Gather signals for a query and correlate them into campaigns.

        Args:
            query: Free-text indicator (domain, hash, family name)
            timeout: Gathering deadline in seconds (settings.gather_timeout if None)
            cancel_event: Optional event the caller can set to abandon gathering;
                providers that have already answered are still correlated

        Returns:
            CorrelationResult; empty when nothing was found
        """
        query = query.strip()
        if not query:
            logger.warning("Empty query; nothing to correlate")
            return CorrelationResult()

        logger.info(f"Analyzing: {query}")
        context = RequestContext(
            timeout=timeout if timeout is not None else self.settings.gather_timeout,
            cancel_event=cancel_event,
        )
        pool = self.gather(query, context)
        result = self.correlate_signals(pool.samples, pool.infrastructure)

        logger.info(
            f"Found {result.stats.total_campaigns} campaigns, "
            f"{result.stats.total_samples} samples, "
            f"{len(result.correlations)} correlations, "
            f"{len(result.infra_overlaps)} shared infrastructure values",
            extra={"context": {"query": query, **result.stats.to_dict()}},
        )
        return result


def correlate_campaigns(
    query: str,
    settings: Optional[Settings] = None,
    timeout: Optional[float] = None,
    cancel_event: Optional[threading.Event] = None,
) -> CorrelationResult:
    """
    Correlate campaigns for a free-text indicator.

    Args:
        query: Domain, hash, IP or malware family name
        settings: Optional settings (process-wide settings if None)
        timeout: Optional gathering deadline in seconds
        cancel_event: Optional cancellation event

    Returns:
        CorrelationResult
    """
    orchestrator = CorrelationOrchestrator(settings or get_settings())
    return orchestrator.correlate(query, timeout=timeout, cancel_event=cancel_event)
