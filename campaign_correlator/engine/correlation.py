"""Pairwise relationship discovery between campaigns."""

import logging
from itertools import combinations
from typing import List, Optional, Sequence

from campaign_correlator.models.campaign import Campaign
from campaign_correlator.models.correlation import CampaignCorrelation
from campaign_correlator.utils.timestamps import round_half_up

logger = logging.getLogger(__name__)

MIN_SHARED_TTPS = 3
TIMELINE_OVERLAP_MIN_DAYS = 7
TIMELINE_OVERLAP_CONFIDENCE = 60


def _shared_values(left: Sequence[str], right: Sequence[str]) -> List[str]:
    """Values present in both sequences, unique, in ``left`` order."""
    right_set = set(right)
    shared: List[str] = []
    for value in left:
        if value in right_set and value not in shared:
            shared.append(value)
    return shared


class CorrelationEngine:
    """
    Compares every unordered pair of campaigns.

    Each satisfied rule yields its own CampaignCorrelation, so one pair can be
    related several ways at once.
    """

    def correlate(self, campaigns: Sequence[Campaign]) -> List[CampaignCorrelation]:
        """
        Find infrastructure-reuse, TTP-match and timeline-overlap relationships.

        Args:
            campaigns: Built campaigns

        Returns:
            Correlations ordered by campaign pair, then rule
        """
        correlations: List[CampaignCorrelation] = []
        for a, b in combinations(campaigns, 2):
            for rule in (self.infra_reuse, self.ttp_match, self.timeline_overlap):
                correlation = rule(a, b)
                if correlation is not None:
                    correlations.append(correlation)

        logger.debug(f"Found {len(correlations)} correlations across {len(campaigns)} campaigns")
        return correlations

    @staticmethod
    def infra_reuse(a: Campaign, b: Campaign) -> Optional[CampaignCorrelation]:
        """
        Campaigns sharing at least one identical infrastructure value.

        Every node of ``a`` whose value appears in ``b`` counts, so a value
        reported by two providers counts twice.
        """
        b_values = {node.value for node in b.infrastructure}
        shared = [node.value for node in a.infrastructure if node.value in b_values]
        if not shared:
            return None
        return CampaignCorrelation(
            campaign_a=a.id,
            campaign_b=b.id,
            correlation_type="infra_reuse",
            confidence=min(90, 50 + 10 * len(shared)),
            evidence=shared,
        )

    @staticmethod
    def ttp_match(a: Campaign, b: Campaign) -> Optional[CampaignCorrelation]:
        """Campaigns sharing at least three TTP identifiers."""
        shared = _shared_values(a.ttps, b.ttps)
        if len(shared) < MIN_SHARED_TTPS:
            return None
        return CampaignCorrelation(
            campaign_a=a.id,
            campaign_b=b.id,
            correlation_type="ttp_match",
            confidence=min(80, 40 + 8 * len(shared)),
            evidence=shared,
        )

    @staticmethod
    def timeline_overlap(a: Campaign, b: Campaign) -> Optional[CampaignCorrelation]:
        """Campaigns whose active windows overlap by more than seven days."""
        if a.first_seen > b.last_seen or b.first_seen > a.last_seen:
            return None

        overlap = min(a.last_seen, b.last_seen) - max(a.first_seen, b.first_seen)
        overlap_days = overlap.total_seconds() / 86400
        if overlap_days <= TIMELINE_OVERLAP_MIN_DAYS:
            return None
        return CampaignCorrelation(
            campaign_a=a.id,
            campaign_b=b.id,
            correlation_type="timeline_overlap",
            confidence=TIMELINE_OVERLAP_CONFIDENCE,
            evidence=[f"{round_half_up(overlap_days)} days overlap"],
        )
