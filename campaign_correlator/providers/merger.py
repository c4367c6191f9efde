"""Signal merger: combines provider results into one signal pool."""

from typing import Iterable

from campaign_correlator.models.signals import ProviderResult


def merge_provider_results(results: Iterable[ProviderResult]) -> ProviderResult:
    """
    Concatenate provider results into a single pool.

    Signals are not deduplicated: the same indicator reported by two providers
    appears twice.
    """
    pool = ProviderResult()
    for result in results:
        pool.samples.extend(result.samples)
        pool.infrastructure.extend(result.infrastructure)
    return pool
