"""Campaign builder: groups sample signals by family into campaigns."""

import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable, Dict, List, Mapping, Optional, Sequence
from urllib.parse import quote

from campaign_correlator.engine.randomizers import RandomSource
from campaign_correlator.engine.scoring import (
    calculate_risk_score,
    clamp_score,
    determine_status,
    mean_confidence,
    threat_level_for,
)
from campaign_correlator.models.campaign import (
    AttributionSignal,
    Campaign,
    CampaignEvent,
    SourceReference,
)
from campaign_correlator.models.family import FamilyProfile
from campaign_correlator.models.signals import InfrastructureNode, MalwareSampleSignal
from campaign_correlator.utils.timestamps import parse_timestamp, parse_valid, round_half_up

logger = logging.getLogger(__name__)

UNKNOWN_FAMILY = "Unknown"
UNKNOWN_ACTOR = "Unknown Actor"
TOOLCHAIN_CONFIDENCE = 85

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CampaignBuilder:
    """Builds Campaign entities from a pool of sample and infrastructure signals."""

    PROVIDER_URLS = {
        "ThreatFox": ("ThreatFox", "https://threatfox.abuse.ch/browse/?search={family}"),
        "MalwareBazaar": ("MalwareBazaar", "https://bazaar.abuse.ch/browse.php?search={family}"),
        "URLhaus": ("URLhaus", "https://urlhaus.abuse.ch/browse.php?search={family}"),
        "FeodoTracker": ("Feodo Tracker", "https://feodotracker.abuse.ch/browse/"),
    }
    DEFAULT_PROVIDER_URL = "https://www.virustotal.com/gui/search/{family}"
    MITRE_URL = "https://attack.mitre.org/techniques/{ttp}/"

    def __init__(
        self,
        families: Mapping[str, FamilyProfile],
        randomizer: Optional[RandomSource] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        """
        Initialize campaign builder.

        Args:
            families: Read-only malware family knowledge base
            randomizer: Optional RandomSource for ids and codenames (creates new if None)
            clock: Optional callable returning the current aware datetime
        """
        self.families = families
        self.randomizer = randomizer or RandomSource()
        self.clock = clock or utc_now

    def build(
        self,
        samples: Sequence[MalwareSampleSignal],
        infrastructure: Sequence[InfrastructureNode],
    ) -> List[Campaign]:
        """
        Group samples by family and build one campaign per non-empty group.

        Args:
            samples: Sample signals from all providers
            infrastructure: Infrastructure nodes from all providers

        Returns:
            Campaigns in order of first family appearance
        """
        now = self.clock()
        campaigns: List[Campaign] = []

        for family, family_samples in self.group_by_family(samples).items():
            if not family_samples:
                continue
            campaign = self._build_campaign(family, family_samples, infrastructure, now)
            logger.debug(
                f"Built campaign {campaign.name} ({len(family_samples)} samples, "
                f"{len(campaign.infrastructure)} infra, status={campaign.status})"
            )
            campaigns.append(campaign)

        return campaigns

    @staticmethod
    def group_by_family(
        samples: Sequence[MalwareSampleSignal],
    ) -> Dict[str, List[MalwareSampleSignal]]:
        """Group samples by family name; a missing family goes to "Unknown"."""
        groups: Dict[str, List[MalwareSampleSignal]] = {}
        for sample in samples:
            groups.setdefault(sample.family or UNKNOWN_FAMILY, []).append(sample)
        return groups

    def _build_campaign(
        self,
        family: str,
        samples: List[MalwareSampleSignal],
        infrastructure: Sequence[InfrastructureNode],
        now: datetime,
    ) -> Campaign:
        profile = self.families.get(family)
        campaign_id = self.randomizer.generate_uuid()

        timestamps = parse_valid(s.first_seen for s in samples)
        if timestamps:
            first_seen, last_seen = min(timestamps), max(timestamps)
        else:
            logger.debug(f"No valid timestamps for {family}; using current time as bounds")
            first_seen = last_seen = now

        related_infra = self.associate_infrastructure(samples, infrastructure, campaign_id)
        status = determine_status(last_seen, now)
        risk_score = calculate_risk_score(samples, related_infra, status)
        attribution = self._attribution(family, profile)
        target_sectors = self.infer_target_sectors(profile)

        return Campaign(
            id=campaign_id,
            name=f"{family} Campaign - {first_seen.strftime('%Y-%m-%d')}",
            codename=self.randomizer.generate_codename(),
            families=[family],
            target_sectors=target_sectors,
            target_regions=self.infer_target_regions(related_infra),
            ttps=list(profile.ttps) if profile else [],
            infrastructure=related_infra,
            samples=list(samples),
            timeline=self._timeline(family, samples, first_seen),
            attribution=attribution,
            status=status,
            first_seen=first_seen,
            last_seen=last_seen,
            confidence=clamp_score(round_half_up(mean_confidence(samples))),
            risk_score=risk_score,
            sources=self._sources(family, samples, profile),
            description=self._description(family, samples, profile, target_sectors),
            actor=attribution[0].value if attribution else UNKNOWN_ACTOR,
            threat_level=threat_level_for(risk_score),
        )

    @staticmethod
    def associate_infrastructure(
        samples: Sequence[MalwareSampleSignal],
        infrastructure: Sequence[InfrastructureNode],
        campaign_id: str,
    ) -> List[InfrastructureNode]:
        """
        Select infrastructure whose value contains a tag of any grouped sample.

        Matching is substring containment; empty tags never match. Each match is
        returned as a campaign-local copy with its back-references filled in.
        """
        related: List[InfrastructureNode] = []
        for node in infrastructure:
            linked = [
                s.id for s in samples if any(tag and tag in node.value for tag in s.tags or [])
            ]
            if linked:
                related.append(
                    replace(node, linked_samples=linked, linked_campaigns=[campaign_id])
                )
        return related

    def _timeline(
        self, family: str, samples: Sequence[MalwareSampleSignal], fallback: datetime
    ) -> List[CampaignEvent]:
        events: List[CampaignEvent] = []
        for sample in samples:
            timestamp = parse_timestamp(sample.first_seen) or fallback
            events.append(
                CampaignEvent(
                    id=self.randomizer.generate_uuid(),
                    timestamp=timestamp,
                    type="sample_detected",
                    description=f"New {family} sample detected from {sample.source}",
                    indicators=[sample.hash] if sample.hash else [],
                    severity="high" if sample.confidence > 80 else "medium",
                )
            )
        return events

    @staticmethod
    def _attribution(family: str, profile: Optional[FamilyProfile]) -> List[AttributionSignal]:
        if profile is None:
            return []
        return [
            AttributionSignal(
                type="toolchain",
                value=family,
                confidence=TOOLCHAIN_CONFIDENCE,
                evidence=f"Known {profile.type} family with documented TTPs",
            )
        ]

    def _sources(
        self,
        family: str,
        samples: Sequence[MalwareSampleSignal],
        profile: Optional[FamilyProfile],
    ) -> List[SourceReference]:
        encoded = quote(family, safe="")
        sources: List[SourceReference] = []
        seen = set()
        for sample in samples:
            if sample.source in seen:
                continue
            seen.add(sample.source)
            name, template = self.PROVIDER_URLS.get(
                sample.source, (sample.source, self.DEFAULT_PROVIDER_URL)
            )
            sources.append(SourceReference(name=name, url=template.format(family=encoded)))

        if profile and profile.ttps:
            sources.append(
                SourceReference(name="MITRE ATT&CK", url=self.MITRE_URL.format(ttp=profile.ttps[0]))
            )
        return sources

    @staticmethod
    def _description(
        family: str,
        samples: Sequence[MalwareSampleSignal],
        profile: Optional[FamilyProfile],
        target_sectors: List[str],
    ) -> str:
        if profile:
            return (
                f"{family} is a known {profile.type} targeting {', '.join(target_sectors)} "
                f"sectors. Capabilities include {', '.join(profile.capabilities[:3])}."
            )
        return (
            f"Active campaign leveraging {family} malware family "
            f"with {len(samples)} detected samples."
        )

    @staticmethod
    def infer_target_sectors(profile: Optional[FamilyProfile]) -> List[str]:
        if profile and profile.sectors:
            return list(profile.sectors)
        return ["general"]

    @staticmethod
    def infer_target_regions(infrastructure: Sequence[InfrastructureNode]) -> List[str]:
        """Distinct infrastructure countries, in first-seen order, excluding unknowns."""
        regions: List[str] = []
        for node in infrastructure:
            if node.country and node.country != "Unknown" and node.country not in regions:
                regions.append(node.country)
        return regions
