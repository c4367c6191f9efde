"""Correlation output models."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from campaign_correlator.models.campaign import Campaign, Severity

CorrelationType = Literal[
    "infra_reuse",
    "toolchain",
    "ttp_match",
    "timeline_overlap",
    "wallet_match",
]


def _isoformat(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


@dataclass(frozen=True)
class CampaignCorrelation:
    """
    A discovered relationship between two campaigns.

    Attributes:
        campaign_a: ID of the first campaign
        campaign_b: ID of the second campaign
        correlation_type: Kind of relationship
        confidence: Confidence in the relationship (0-100)
        evidence: Supporting evidence strings
    """

    campaign_a: str
    campaign_b: str
    correlation_type: CorrelationType
    confidence: int
    evidence: List[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "campaign_a": self.campaign_a,
            "campaign_b": self.campaign_b,
            "correlation_type": self.correlation_type,
            "confidence": self.confidence,
            "evidence": list(self.evidence),
        }


@dataclass(frozen=True)
class TimeRange:
    """Time span of observations; both ends are None when nothing was parseable."""

    start: Optional[datetime]
    end: Optional[datetime]

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {"start": _isoformat(self.start), "end": _isoformat(self.end)}


@dataclass(frozen=True)
class InfraOverlap:
    """An infrastructure value shared across campaigns or families."""

    indicator: str
    campaigns: List[str]
    families: List[str]
    time_range: TimeRange

    def to_dict(self) -> Dict[str, Any]:
        return {
            "indicator": self.indicator,
            "campaigns": list(self.campaigns),
            "families": list(self.families),
            "time_range": self.time_range.to_dict(),
        }


@dataclass(frozen=True)
class TimelineEvent:
    """A campaign event projected onto the global timeline."""

    timestamp: datetime
    campaign_id: str
    type: str
    description: str
    severity: Severity

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "campaign_id": self.campaign_id,
            "type": self.type,
            "description": self.description,
            "severity": self.severity,
        }


@dataclass(frozen=True)
class CorrelationStats:
    """Aggregate statistics over one correlation run."""

    total_samples: int = 0
    total_campaigns: int = 0
    active_threats: int = 0
    correlation_strength: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "total_samples": self.total_samples,
            "total_campaigns": self.total_campaigns,
            "active_threats": self.active_threats,
            "correlation_strength": self.correlation_strength,
        }


@dataclass
class CorrelationResult:
    """The full output of one correlation request."""

    campaigns: List[Campaign] = field(default_factory=list)
    correlations: List[CampaignCorrelation] = field(default_factory=list)
    infra_overlaps: List[InfraOverlap] = field(default_factory=list)
    timeline: List[TimelineEvent] = field(default_factory=list)
    stats: CorrelationStats = field(default_factory=CorrelationStats)

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to dictionary for serialization."""
        return {
            "campaigns": [campaign.to_dict() for campaign in self.campaigns],
            "correlations": [correlation.to_dict() for correlation in self.correlations],
            "infra_overlaps": [overlap.to_dict() for overlap in self.infra_overlaps],
            "timeline": [event.to_dict() for event in self.timeline],
            "stats": self.stats.to_dict(),
        }
