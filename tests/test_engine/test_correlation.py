"""Tests for CorrelationEngine."""

from datetime import timedelta

from campaign_correlator.engine.correlation import CorrelationEngine
from campaign_correlator.models.campaign import Campaign
from conftest import NOW, make_node, make_sample


def _campaign(
    id: str,
    infra=(),
    ttps=(),
    first_days_ago: float = 2,
    last_days_ago: float = 1,
) -> Campaign:
    return Campaign(
        id=id,
        name=f"Campaign {id}",
        families=[f"Family-{id}"],
        target_sectors=["general"],
        target_regions=[],
        ttps=list(ttps),
        infrastructure=[make_node(value) for value in infra],
        samples=[make_sample(id=f"{id}-s", family=f"Family-{id}")],
        timeline=[],
        attribution=[],
        status="active",
        first_seen=NOW - timedelta(days=first_days_ago),
        last_seen=NOW - timedelta(days=last_days_ago),
        confidence=75,
        risk_score=50,
    )


def _of_type(correlations, correlation_type):
    return [c for c in correlations if c.correlation_type == correlation_type]


def test_no_campaigns_yields_no_correlations():
    """Test that correlate() handles empty and single-campaign input."""
    engine = CorrelationEngine()
    assert engine.correlate([]) == []
    assert engine.correlate([_campaign("a")]) == []


def test_shared_infrastructure_yields_infra_reuse():
    """Test infra_reuse with confidence 50 + 10 per shared value."""
    a = _campaign("a", infra=["1.1.1.1", "evil.example.com", "x.example"])
    b = _campaign("b", infra=["evil.example.com", "1.1.1.1"])

    correlations = _of_type(CorrelationEngine().correlate([a, b]), "infra_reuse")

    assert len(correlations) == 1
    correlation = correlations[0]
    assert (correlation.campaign_a, correlation.campaign_b) == ("a", "b")
    assert correlation.confidence == 70
    assert correlation.evidence == ["1.1.1.1", "evil.example.com"]


def test_infra_reuse_requires_exact_equality():
    """Test that substrings of infrastructure values do not count as shared."""
    a = _campaign("a", infra=["evil.example.com"])
    b = _campaign("b", infra=["evil.example.com.attacker.net"])

    assert _of_type(CorrelationEngine().correlate([a, b]), "infra_reuse") == []


def test_infra_reuse_confidence_caps_at_90():
    """Test that infra_reuse confidence never exceeds 90."""
    values = [f"10.0.0.{i}" for i in range(8)]
    a = _campaign("a", infra=values)
    b = _campaign("b", infra=values)

    correlation = _of_type(CorrelationEngine().correlate([a, b]), "infra_reuse")[0]

    assert correlation.confidence == 90
    assert len(correlation.evidence) == 8


def test_infra_reuse_counts_each_matching_node():
    """Test that a value reported by two providers counts once per node."""
    a = _campaign("a", infra=["http://evil.example.com/x", "http://evil.example.com/x"])
    b = _campaign("b", infra=["http://evil.example.com/x"])

    correlation = _of_type(CorrelationEngine().correlate([a, b]), "infra_reuse")[0]

    assert correlation.confidence == 70
    assert correlation.evidence == ["http://evil.example.com/x", "http://evil.example.com/x"]


def test_infra_reuse_counts_nodes_of_first_campaign_only():
    """Test that duplicates on the second campaign do not inflate the count."""
    a = _campaign("a", infra=["evil.example.com"])
    b = _campaign("b", infra=["evil.example.com", "evil.example.com"])

    correlation = _of_type(CorrelationEngine().correlate([a, b]), "infra_reuse")[0]

    assert correlation.confidence == 60
    assert correlation.evidence == ["evil.example.com"]


def test_three_shared_ttps_yield_ttp_match():
    """Test ttp_match at the threshold of three shared TTPs."""
    a = _campaign("a", ttps=["T1555", "T1539", "T1552", "T1113"])
    b = _campaign("b", ttps=["T1552", "T1539", "T1555"])

    correlation = _of_type(CorrelationEngine().correlate([a, b]), "ttp_match")[0]

    assert correlation.confidence == 64
    assert correlation.evidence == ["T1555", "T1539", "T1552"]


def test_two_shared_ttps_do_not_match():
    """Test that fewer than three shared TTPs produce no ttp_match."""
    a = _campaign("a", ttps=["T1555", "T1539"])
    b = _campaign("b", ttps=["T1555", "T1539", "T1486"])

    assert _of_type(CorrelationEngine().correlate([a, b]), "ttp_match") == []


def test_ttp_match_confidence_caps_at_80():
    """Test that ttp_match confidence never exceeds 80."""
    ttps = ["T1", "T2", "T3", "T4", "T5", "T6"]

    correlation = _of_type(
        CorrelationEngine().correlate([_campaign("a", ttps=ttps), _campaign("b", ttps=ttps)]),
        "ttp_match",
    )[0]

    assert correlation.confidence == 80


def test_timeline_overlap_longer_than_seven_days():
    """Test timeline_overlap with fixed confidence and day evidence."""
    a = _campaign("a", first_days_ago=30, last_days_ago=5)
    b = _campaign("b", first_days_ago=20, last_days_ago=1)

    correlation = _of_type(CorrelationEngine().correlate([a, b]), "timeline_overlap")[0]

    assert correlation.confidence == 60
    assert correlation.evidence == ["15 days overlap"]


def test_timeline_overlap_of_exactly_seven_days_is_ignored():
    """Test that an overlap must exceed seven days."""
    a = _campaign("a", first_days_ago=20, last_days_ago=10)
    b = _campaign("b", first_days_ago=17, last_days_ago=2)

    assert _of_type(CorrelationEngine().correlate([a, b]), "timeline_overlap") == []


def test_disjoint_timelines_do_not_overlap():
    """Test that non-intersecting windows produce nothing."""
    a = _campaign("a", first_days_ago=60, last_days_ago=40)
    b = _campaign("b", first_days_ago=20, last_days_ago=1)

    assert CorrelationEngine().correlate([a, b]) == []


def test_pair_can_produce_multiple_correlations():
    """Test that every satisfied rule yields its own record."""
    a = _campaign("a", infra=["evil.example.com"], ttps=["T1", "T2", "T3"], first_days_ago=30)
    b = _campaign("b", infra=["evil.example.com"], ttps=["T1", "T2", "T3"], first_days_ago=30)

    correlations = CorrelationEngine().correlate([a, b])

    assert [c.correlation_type for c in correlations] == [
        "infra_reuse",
        "ttp_match",
        "timeline_overlap",
    ]


def test_every_unordered_pair_is_compared_once():
    """Test that three campaigns sharing infrastructure yield three pairs."""
    campaigns = [_campaign(id, infra=["shared.example"]) for id in ("a", "b", "c")]

    correlations = _of_type(CorrelationEngine().correlate(campaigns), "infra_reuse")

    assert [(c.campaign_a, c.campaign_b) for c in correlations] == [
        ("a", "b"),
        ("a", "c"),
        ("b", "c"),
    ]
