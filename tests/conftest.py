"""Pytest configuration and fixtures."""

from datetime import datetime, timedelta, timezone
from typing import List, Optional
from unittest.mock import MagicMock

import pytest

from campaign_correlator.config.loader import DEFAULT_KNOWLEDGE_BASE, load_family_profiles_from_file
from campaign_correlator.config.settings import Settings
from campaign_correlator.engine.builder import CampaignBuilder
from campaign_correlator.engine.randomizers import RandomSource
from campaign_correlator.models.signals import (
    InfrastructureNode,
    MalwareSampleSignal,
    ProviderResult,
)
from campaign_correlator.providers.base import BaseProvider

NOW = datetime(2026, 3, 15, 12, 0, 0, tzinfo=timezone.utc)


def iso(days_ago: float) -> str:
    """ISO timestamp ``days_ago`` days before NOW."""
    return (NOW - timedelta(days=days_ago)).isoformat()


def make_sample(
    id: str = "s1",
    family: str = "RedLine",
    first_seen: Optional[str] = None,
    last_seen: Optional[str] = None,
    source: str = "ThreatFox",
    tags: Optional[List[str]] = None,
    confidence: int = 80,
    hash: str = "",
) -> MalwareSampleSignal:
    """Build a sample signal with sensible defaults."""
    return MalwareSampleSignal(
        id=id,
        hash=hash,
        hash_type="sha256",
        family=family,
        type="infostealer",
        capabilities=[],
        first_seen=first_seen if first_seen is not None else iso(1),
        last_seen=last_seen if last_seen is not None else iso(1),
        source=source,
        tags=tags or [],
        confidence=confidence,
    )


def make_node(
    value: str,
    id: Optional[str] = None,
    status: str = "active",
    first_seen: Optional[str] = None,
    last_seen: Optional[str] = None,
    country: Optional[str] = None,
) -> InfrastructureNode:
    """Build an infrastructure node with sensible defaults."""
    return InfrastructureNode(
        id=id or f"node-{value}",
        type="c2",
        value=value,
        first_seen=first_seen if first_seen is not None else iso(3),
        last_seen=last_seen if last_seen is not None else iso(1),
        status=status,
        country=country,
    )


@pytest.fixture
def settings():
    """Create test settings instance."""
    return Settings(
        threatfox_url="https://threatfox.test/api/v1/",
        urlhaus_url="https://urlhaus.test/v1/url/",
        malwarebazaar_url="https://bazaar.test/api/v1/",
        feodo_url="https://feodo.test/ipblocklist.json",
        request_timeout=5,
        gather_timeout=10,
    )


@pytest.fixture
def families():
    """Packaged malware family knowledge base."""
    profiles = load_family_profiles_from_file(str(DEFAULT_KNOWLEDGE_BASE))
    assert profiles is not None
    return profiles


@pytest.fixture
def clock():
    """Fixed clock returning NOW."""
    return lambda: NOW


@pytest.fixture
def builder(families, clock):
    """Campaign builder with a seeded random source and fixed clock."""
    return CampaignBuilder(families, RandomSource(seed=1234), clock)


@pytest.fixture
def redline_samples() -> List[MalwareSampleSignal]:
    """Five RedLine samples seen within two days, all recent."""
    return [
        make_sample(
            id=f"rl-{i}",
            family="RedLine",
            first_seen=iso(3 - i * 0.5),
            last_seen=iso(1),
            tags=["redline", "evil-c2"],
            confidence=80,
            hash=f"{i:064x}",
        )
        for i in range(5)
    ]


@pytest.fixture
def mock_provider():
    """Create a mock provider returning one sample and one node."""
    mock = MagicMock(spec=BaseProvider)
    mock.name = "Mock"
    mock.search.return_value = ProviderResult(
        samples=[make_sample(id="mock-1", tags=["evil"])],
        infrastructure=[make_node("evil.example.com")],
    )
    return mock
