"""Data models for the campaign correlator."""

from campaign_correlator.models.campaign import (
    AttributionSignal,
    Campaign,
    CampaignEvent,
    SourceReference,
)
from campaign_correlator.models.correlation import (
    CampaignCorrelation,
    CorrelationResult,
    CorrelationStats,
    InfraOverlap,
    TimelineEvent,
    TimeRange,
)
from campaign_correlator.models.family import DetectionHint, FamilyProfile
from campaign_correlator.models.signals import (
    InfrastructureNode,
    MalwareSampleSignal,
    ProviderResult,
)

__all__ = [
    "AttributionSignal",
    "Campaign",
    "CampaignCorrelation",
    "CampaignEvent",
    "CorrelationResult",
    "CorrelationStats",
    "DetectionHint",
    "FamilyProfile",
    "InfraOverlap",
    "InfrastructureNode",
    "MalwareSampleSignal",
    "ProviderResult",
    "SourceReference",
    "TimeRange",
    "TimelineEvent",
]
