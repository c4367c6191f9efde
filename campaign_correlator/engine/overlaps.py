"""Infrastructure overlap detection across campaigns and families."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Sequence

from campaign_correlator.models.campaign import Campaign
from campaign_correlator.models.correlation import InfraOverlap, TimeRange
from campaign_correlator.models.signals import InfrastructureNode
from campaign_correlator.utils.timestamps import parse_valid

logger = logging.getLogger(__name__)


@dataclass
class _IndicatorUsage:
    campaigns: List[str] = field(default_factory=list)
    families: List[str] = field(default_factory=list)
    times: List[datetime] = field(default_factory=list)

    def observe(self, node: InfrastructureNode) -> None:
        self.times.extend(parse_valid([node.first_seen, node.last_seen]))


def _add_unique(values: List[str], value: str) -> None:
    if value not in values:
        values.append(value)


def find_infra_overlaps(
    infrastructure: Sequence[InfrastructureNode],
    campaigns: Sequence[Campaign],
) -> List[InfraOverlap]:
    """
    Flag infrastructure values referenced by several campaigns or families.

    The index is keyed by ``value``; every campaign's copy of a node contributes
    its campaign name, families and timestamps. Pool reports of an indexed value
    widen its time range. Unparseable timestamps are skipped.

    Args:
        infrastructure: Infrastructure pool gathered for the request
        campaigns: Built campaigns

    Returns:
        One InfraOverlap per value seen in more than one campaign or family
    """
    index: Dict[str, _IndicatorUsage] = {}

    for campaign in campaigns:
        for node in campaign.infrastructure:
            usage = index.setdefault(node.value, _IndicatorUsage())
            _add_unique(usage.campaigns, campaign.name)
            for family in campaign.families:
                _add_unique(usage.families, family)
            usage.observe(node)

    for node in infrastructure:
        usage = index.get(node.value)
        if usage is not None:
            usage.observe(node)

    overlaps: List[InfraOverlap] = []
    for indicator, usage in index.items():
        if len(usage.campaigns) > 1 or len(usage.families) > 1:
            overlaps.append(
                InfraOverlap(
                    indicator=indicator,
                    campaigns=usage.campaigns,
                    families=usage.families,
                    time_range=TimeRange(
                        start=min(usage.times) if usage.times else None,
                        end=max(usage.times) if usage.times else None,
                    ),
                )
            )

    logger.debug(f"Indexed {len(index)} infrastructure values, {len(overlaps)} shared")
    return overlaps
