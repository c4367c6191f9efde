"""Tests for Campaign and result models."""

import json
from datetime import timedelta

import pytest

from campaign_correlator.models.campaign import Campaign, CampaignEvent
from campaign_correlator.models.correlation import (
    CampaignCorrelation,
    CorrelationResult,
    CorrelationStats,
    InfraOverlap,
    TimeRange,
)
from conftest import NOW, make_node, make_sample


def _campaign(**overrides) -> Campaign:
    fields = dict(
        id="c1",
        name="RedLine Campaign - 2026-03-14",
        families=["RedLine"],
        target_sectors=["finance"],
        target_regions=[],
        ttps=["T1555"],
        infrastructure=[make_node("evil.example.com")],
        samples=[make_sample()],
        timeline=[],
        attribution=[],
        status="active",
        first_seen=NOW - timedelta(days=2),
        last_seen=NOW - timedelta(days=1),
        confidence=80,
        risk_score=60,
    )
    fields.update(overrides)
    return Campaign(**fields)


def test_campaign_creation_succeeds():
    """Test that valid campaign creation works."""
    campaign = _campaign()
    assert campaign.id == "c1"
    assert campaign.families == ["RedLine"]
    assert campaign.sources == []
    assert campaign.codename is None


def test_campaign_without_samples_raises_value_error():
    """Test that a campaign must have at least one sample."""
    with pytest.raises(ValueError, match="at least one sample"):
        _campaign(samples=[])


def test_campaign_first_seen_after_last_seen_raises_value_error():
    """Test that first_seen must not be after last_seen."""
    with pytest.raises(ValueError, match="first_seen cannot be after last_seen"):
        _campaign(first_seen=NOW, last_seen=NOW - timedelta(days=1))


def test_campaign_scores_out_of_range_raise_value_error():
    """Test that risk score and confidence are bounded."""
    with pytest.raises(ValueError, match="Risk score"):
        _campaign(risk_score=101)
    with pytest.raises(ValueError, match="Confidence"):
        _campaign(confidence=-5)


def test_campaign_invalid_status_raises_value_error():
    """Test that an unknown status raises ValueError."""
    with pytest.raises(ValueError, match="Invalid campaign status"):
        _campaign(status="paused")


def test_event_invalid_severity_raises_value_error():
    """Test that CampaignEvent validates severity."""
    with pytest.raises(ValueError, match="Invalid severity"):
        CampaignEvent(
            id="e1",
            timestamp=NOW,
            type="sample_detected",
            description="x",
            indicators=[],
            severity="extreme",
        )


def test_correlation_result_defaults_are_empty():
    """Test that an empty CorrelationResult has zeroed stats."""
    result = CorrelationResult()
    assert result.campaigns == []
    assert result.correlations == []
    assert result.infra_overlaps == []
    assert result.timeline == []
    assert result.stats == CorrelationStats(0, 0, 0, 0)


def test_correlation_result_to_dict_is_json_serializable():
    """Test that the full result serializes to JSON."""
    result = CorrelationResult(
        campaigns=[_campaign()],
        correlations=[
            CampaignCorrelation(
                campaign_a="c1",
                campaign_b="c2",
                correlation_type="infra_reuse",
                confidence=60,
                evidence=["evil.example.com"],
            )
        ],
        infra_overlaps=[
            InfraOverlap(
                indicator="evil.example.com",
                campaigns=["A", "B"],
                families=["RedLine", "Vidar"],
                time_range=TimeRange(start=None, end=None),
            )
        ],
    )

    data = json.loads(json.dumps(result.to_dict()))

    assert data["campaigns"][0]["first_seen"] == (NOW - timedelta(days=2)).isoformat()
    assert data["correlations"][0]["correlation_type"] == "infra_reuse"
    assert data["infra_overlaps"][0]["time_range"] == {"start": None, "end": None}
    assert data["stats"]["total_campaigns"] == 0
