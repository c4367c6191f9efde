"""Campaign correlation engine."""

from campaign_correlator.engine.builder import CampaignBuilder
from campaign_correlator.engine.correlation import CorrelationEngine
from campaign_correlator.engine.overlaps import find_infra_overlaps
from campaign_correlator.engine.randomizers import RandomSource
from campaign_correlator.engine.scoring import calculate_risk_score, determine_status, summarize
from campaign_correlator.engine.timeline import build_timeline

__all__ = [
    "CampaignBuilder",
    "CorrelationEngine",
    "RandomSource",
    "build_timeline",
    "calculate_risk_score",
    "determine_status",
    "find_infra_overlaps",
    "summarize",
]
