"""Reference knowledge about known malware families."""

from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class DetectionHint:
    """
    A detection-pattern hint for a malware family.

    Attributes:
        type: Hint kind (e.g., "mutex", "string", "c2_path", "ja3")
        pattern: Pattern or literal value
    """

    type: str
    pattern: str


@dataclass(frozen=True)
class FamilyProfile:
    """
    Documented profile of a known malware family.

    Attributes:
        name: Family name as reported by providers (e.g., "RedLine")
        type: Behavioral type (infostealer, ransomware, rat, loader, ...)
        capabilities: Capability identifiers, most significant first
        kill_chain: Typical delivery / initial-access stages
        ttps: MITRE ATT&CK technique identifiers
        indicators: Detection-pattern hints
        sectors: Sectors the family is known to target
    """

    name: str
    type: str
    capabilities: List[str]
    kill_chain: List[str]
    ttps: List[str]
    indicators: List[DetectionHint] = field(default_factory=list)
    sectors: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate family profile attributes."""
        if not self.name:
            raise ValueError("Family name cannot be empty")
        if not self.type:
            raise ValueError(f"Family '{self.name}' must declare a behavioral type")
