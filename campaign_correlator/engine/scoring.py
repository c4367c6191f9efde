"""Scoring helpers shared by the campaign builder and result summarizer."""

from datetime import datetime
from typing import List, Sequence

from campaign_correlator.models.campaign import Campaign, CampaignStatus, Severity
from campaign_correlator.models.correlation import CampaignCorrelation, CorrelationStats
from campaign_correlator.models.signals import InfrastructureNode, MalwareSampleSignal
from campaign_correlator.utils.timestamps import round_half_up

ACTIVE_WINDOW_DAYS = 7
DORMANT_WINDOW_DAYS = 30

STATUS_BONUS = {
    "active": 25,
    "dormant": 10,
    "concluded": 0,
}


def clamp_score(value: float) -> int:
    """Clamp a score into the integer range [0, 100]."""
    return max(0, min(100, int(value)))


def determine_status(last_seen: datetime, now: datetime) -> CampaignStatus:
    """
    Derive campaign lifecycle status from time elapsed since last_seen.

    Args:
        last_seen: Campaign last-seen timestamp
        now: Reference time

    Returns:
        'active' (< 7 days), 'dormant' (< 30 days) or 'concluded'
    """
    days_since = (now - last_seen).total_seconds() / 86400
    if days_since < ACTIVE_WINDOW_DAYS:
        return "active"
    elif days_since < DORMANT_WINDOW_DAYS:
        return "dormant"
    else:
        return "concluded"


def mean_confidence(samples: Sequence[MalwareSampleSignal]) -> float:
    if not samples:
        return 0.0
    return sum(s.confidence for s in samples) / len(samples)


def calculate_risk_score(
    samples: Sequence[MalwareSampleSignal],
    infrastructure: Sequence[InfrastructureNode],
    status: CampaignStatus,
) -> int:
    """
    Calculate a campaign risk score.

    Components: sample volume (max 30), active infrastructure (max 25),
    lifecycle status bonus (25/10/0) and 20% of mean sample confidence.

    Returns:
        Risk score clamped to [0, 100]
    """
    active_infra = sum(1 for node in infrastructure if node.status == "active")

    score = min(30, 3 * len(samples))
    score += min(25, 5 * active_infra)
    score += STATUS_BONUS.get(status, 0)
    score += round_half_up(0.2 * mean_confidence(samples))

    return clamp_score(min(100, score))


def threat_level_for(risk_score: int) -> Severity:
    if risk_score > 70:
        return "critical"
    elif risk_score > 50:
        return "high"
    return "medium"


def calculate_correlation_strength(correlations: Sequence[CampaignCorrelation]) -> int:
    """Mean correlation confidence, or 0 when nothing correlated."""
    if not correlations:
        return 0
    return round_half_up(sum(c.confidence for c in correlations) / len(correlations))


def summarize(
    campaigns: List[Campaign], correlations: List[CampaignCorrelation]
) -> CorrelationStats:
    """
    Compute aggregate statistics for a correlation run.

    Sample counts are summed per campaign without cross-campaign deduplication.
    """
    return CorrelationStats(
        total_samples=sum(len(c.samples) for c in campaigns),
        total_campaigns=len(campaigns),
        active_threats=sum(1 for c in campaigns if c.status == "active"),
        correlation_strength=calculate_correlation_strength(correlations),
    )
