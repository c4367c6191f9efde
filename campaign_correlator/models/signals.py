"""Signal models produced by provider adapters."""

from dataclasses import dataclass, field
from typing import List, Literal, Optional

HashType = Literal["sha256", "md5", "sha1"]

SampleType = Literal[
    "infostealer",
    "ransomware",
    "rat",
    "loader",
    "dropper",
    "backdoor",
    "botnet",
    "miner",
    "unknown",
]

InfraType = Literal["c2", "dropper", "staging", "exfil", "proxy", "bulletproof"]

InfraStatus = Literal["active", "inactive", "sinkholed", "seized"]

SAMPLE_TYPES = (
    "infostealer",
    "ransomware",
    "rat",
    "loader",
    "dropper",
    "backdoor",
    "botnet",
    "miner",
    "unknown",
)
INFRA_TYPES = ("c2", "dropper", "staging", "exfil", "proxy", "bulletproof")
INFRA_STATUSES = ("active", "inactive", "sinkholed", "seized")


@dataclass(frozen=True)
class MalwareSampleSignal:
    """
    A single malware-sample observation reported by a provider.

    Attributes:
        id: Provider-scoped sample identifier
        hash: Content hash (may be empty when the provider only reported an IOC)
        hash_type: Hash algorithm
        family: Malware family name (empty means "Unknown")
        type: Behavioral type
        capabilities: Capability tags
        first_seen: Raw first-seen timestamp as reported (may be malformed)
        last_seen: Raw last-seen timestamp as reported (may be malformed)
        source: Originating provider name
        tags: Free-text provider tags
        confidence: Provider confidence (0-100)
    """

    id: str
    hash: str
    hash_type: HashType
    family: str
    type: SampleType
    capabilities: List[str]
    first_seen: Optional[str]
    last_seen: Optional[str]
    source: str
    tags: List[str]
    confidence: int

    def __post_init__(self) -> None:
        """Validate sample attributes."""
        if not self.id:
            raise ValueError("Sample ID cannot be empty")
        if self.type not in SAMPLE_TYPES:
            raise ValueError(f"Invalid sample type: {self.type}")
        if not 0 <= self.confidence <= 100:
            raise ValueError(f"Confidence must be between 0 and 100, got {self.confidence}")

    def to_dict(self) -> dict:
        """Convert sample to dictionary for serialization."""
        return {
            "id": self.id,
            "hash": self.hash,
            "hash_type": self.hash_type,
            "family": self.family,
            "type": self.type,
            "capabilities": list(self.capabilities),
            "first_seen": self.first_seen,
            "last_seen": self.last_seen,
            "source": self.source,
            "tags": list(self.tags),
            "confidence": self.confidence,
        }


@dataclass
class InfrastructureNode:
    """
    A network artifact (IP, domain or URL) tied to malware operations.

    ``value`` identifies the artifact across providers: two nodes with the same
    value are the same artifact for overlap detection. ``linked_samples`` and
    ``linked_campaigns`` are filled in by the campaign builder on its own copy.
    """

    id: str
    type: InfraType
    value: str
    first_seen: Optional[str]
    last_seen: Optional[str]
    status: InfraStatus
    port: Optional[int] = None
    protocol: Optional[str] = None
    asn: Optional[str] = None
    asn_org: Optional[str] = None
    country: Optional[str] = None
    hosting: Optional[str] = None
    tls_cert_hash: Optional[str] = None
    rotation_rate: Optional[float] = None
    linked_samples: List[str] = field(default_factory=list)
    linked_campaigns: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate infrastructure attributes."""
        if not self.value:
            raise ValueError("Infrastructure value cannot be empty")
        if self.type not in INFRA_TYPES:
            raise ValueError(f"Invalid infrastructure type: {self.type}")
        if self.status not in INFRA_STATUSES:
            raise ValueError(f"Invalid infrastructure status: {self.status}")

    def to_dict(self) -> dict:
        """Convert node to dictionary for serialization."""
        return {
            "id": self.id,
            "type": self.type,
            "value": self.value,
            "port": self.port,
            "protocol": self.protocol,
            "asn": self.asn,
            "asn_org": self.asn_org,
            "country": self.country,
            "hosting": self.hosting,
            "tls_cert_hash": self.tls_cert_hash,
            "first_seen": self.first_seen,
            "last_seen": self.last_seen,
            "status": self.status,
            "rotation_rate": self.rotation_rate,
            "linked_samples": list(self.linked_samples),
            "linked_campaigns": list(self.linked_campaigns),
        }


@dataclass
class ProviderResult:
    """Normalized output of one provider adapter for one query."""

    samples: List[MalwareSampleSignal] = field(default_factory=list)
    infrastructure: List[InfrastructureNode] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.samples and not self.infrastructure
