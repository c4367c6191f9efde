"""Campaign model representing correlated malware activity."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from campaign_correlator.models.signals import InfrastructureNode, MalwareSampleSignal

Severity = Literal["low", "medium", "high", "critical"]

CampaignStatus = Literal["active", "dormant", "concluded"]

EventType = Literal[
    "sample_detected",
    "infra_change",
    "new_variant",
    "takedown",
    "victim_spike",
    "ttp_evolution",
]

AttributionType = Literal[
    "language",
    "timezone",
    "toolchain",
    "infrastructure",
    "ttp_overlap",
    "historical",
]

SEVERITIES = ("low", "medium", "high", "critical")
CAMPAIGN_STATUSES = ("active", "dormant", "concluded")


@dataclass(frozen=True)
class CampaignEvent:
    """
    A single entry in a campaign's timeline.

    Attributes:
        id: Event identifier
        timestamp: When the event happened (UTC)
        type: Event kind
        description: Human-readable description
        indicators: Indicator values referenced by the event
        severity: Event severity
    """

    id: str
    timestamp: datetime
    type: EventType
    description: str
    indicators: List[str]
    severity: Severity

    def __post_init__(self) -> None:
        """Validate event attributes."""
        if self.severity not in SEVERITIES:
            raise ValueError(
                f"Invalid severity: {self.severity}. Must be one of: low, medium, high, critical"
            )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp.isoformat(),
            "type": self.type,
            "description": self.description,
            "indicators": list(self.indicators),
            "severity": self.severity,
        }


@dataclass(frozen=True)
class AttributionSignal:
    """A weighted clue about who operates a campaign."""

    type: AttributionType
    value: str
    confidence: int
    evidence: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "value": self.value,
            "confidence": self.confidence,
            "evidence": self.evidence,
        }


@dataclass(frozen=True)
class SourceReference:
    """Provenance entry: provider name and a reference URL."""

    name: str
    url: str

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "url": self.url}


@dataclass
class Campaign:
    """
    A postulated grouping of malware activity inferred from one malware family.

    Attributes:
        id: Unique campaign identifier
        name: Display name
        families: Malware families covered by the campaign
        target_sectors: Inferred target sectors
        target_regions: Countries observed in the campaign's infrastructure
        ttps: MITRE ATT&CK technique identifiers
        infrastructure: Campaign-local copies of associated infrastructure
        samples: Samples grouped into the campaign
        timeline: Campaign-local events
        attribution: Attribution signals
        status: Lifecycle status derived from time since last_seen
        first_seen: Earliest valid sample first-seen timestamp
        last_seen: Latest valid sample first-seen timestamp
        confidence: Mean sample confidence (0-100)
        risk_score: Risk score (0-100)
        sources: Provenance references
        codename: Cosmetic "ADJECTIVE NOUN" label
        description: Templated description
        actor: Inferred actor label
        threat_level: Coarse bucket derived from risk_score
    """

    id: str
    name: str
    families: List[str]
    target_sectors: List[str]
    target_regions: List[str]
    ttps: List[str]
    infrastructure: List[InfrastructureNode]
    samples: List[MalwareSampleSignal]
    timeline: List[CampaignEvent]
    attribution: List[AttributionSignal]
    status: CampaignStatus
    first_seen: datetime
    last_seen: datetime
    confidence: int
    risk_score: int
    sources: List[SourceReference] = field(default_factory=list)
    codename: Optional[str] = None
    description: Optional[str] = None
    actor: Optional[str] = None
    threat_level: Optional[Severity] = None

    def __post_init__(self) -> None:
        """Validate campaign attributes."""
        if not self.id:
            raise ValueError("Campaign ID cannot be empty")
        if not self.samples:
            raise ValueError("Campaign must have at least one sample")
        if self.first_seen > self.last_seen:
            raise ValueError("Campaign first_seen cannot be after last_seen")
        if self.status not in CAMPAIGN_STATUSES:
            raise ValueError(f"Invalid campaign status: {self.status}")
        if not 0 <= self.confidence <= 100:
            raise ValueError(f"Confidence must be between 0 and 100, got {self.confidence}")
        if not 0 <= self.risk_score <= 100:
            raise ValueError(f"Risk score must be between 0 and 100, got {self.risk_score}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert campaign to dictionary for serialization."""
        return {
            "id": self.id,
            "name": self.name,
            "codename": self.codename,
            "families": list(self.families),
            "target_sectors": list(self.target_sectors),
            "target_regions": list(self.target_regions),
            "ttps": list(self.ttps),
            "infrastructure": [node.to_dict() for node in self.infrastructure],
            "samples": [sample.to_dict() for sample in self.samples],
            "timeline": [event.to_dict() for event in self.timeline],
            "attribution": [signal.to_dict() for signal in self.attribution],
            "status": self.status,
            "first_seen": self.first_seen.isoformat(),
            "last_seen": self.last_seen.isoformat(),
            "confidence": self.confidence,
            "risk_score": self.risk_score,
            "sources": [source.to_dict() for source in self.sources],
            "description": self.description,
            "actor": self.actor,
            "threat_level": self.threat_level,
        }
