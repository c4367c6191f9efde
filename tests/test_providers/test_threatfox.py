"""Tests for the ThreatFox adapter."""

from unittest.mock import MagicMock, patch

import pytest

from campaign_correlator.providers.base import RequestContext
from campaign_correlator.providers.threatfox import ThreatFoxProvider


@pytest.fixture
def provider(settings, families):
    return ThreatFoxProvider(settings, families)


def _response(status_code=200, payload=None):
    response = MagicMock()
    response.status_code = status_code
    response.text = "error"
    response.json.return_value = payload or {}
    return response


@patch("requests.post")
def test_search_maps_network_iocs_and_samples(mock_post, provider):
    """Test that a domain IOC yields one node and one sample."""
    mock_post.return_value = _response(
        payload={
            "query_status": "ok",
            "data": [
                {
                    "id": "101",
                    "ioc": "evil-c2.example.com",
                    "ioc_type": "domain",
                    "threat_type": "botnet_cc",
                    "malware": "RedLine",
                    "confidence_level": 90,
                    "first_seen": "2024-05-01 08:00:00 UTC",
                    "last_seen": None,
                    "reporter_country": "NL",
                    "is_active": True,
                    "tags": ["redline", "stealer"],
                }
            ],
        }
    )

    result = provider.search("evil-c2.example.com", RequestContext())

    assert len(result.infrastructure) == 1
    node = result.infrastructure[0]
    assert node.id == "tf-101"
    assert node.type == "c2"
    assert node.value == "evil-c2.example.com"
    assert node.country == "NL"
    assert node.status == "active"
    assert node.last_seen is None

    assert len(result.samples) == 1
    sample = result.samples[0]
    assert sample.id == "tf-sample-101"
    assert sample.hash == ""
    assert sample.family == "RedLine"
    assert sample.type == "infostealer"
    assert "browser_creds" in sample.capabilities
    assert sample.source == "ThreatFox"
    assert sample.tags == ["redline", "stealer"]
    assert sample.confidence == 90

    _, kwargs = mock_post.call_args
    assert kwargs["json"] == {"query": "search_ioc", "search_term": "evil-c2.example.com"}
    assert kwargs["timeout"] <= 5


@patch("requests.post")
def test_hash_ioc_yields_sample_only(mock_post, provider):
    """Test that hash IOCs populate the sample hash and create no node."""
    mock_post.return_value = _response(
        payload={
            "data": [
                {
                    "id": 7,
                    "ioc": "ab" * 32,
                    "ioc_type": "sha256_hash",
                    "malware": "UnknownFamily",
                    "threat_type": "payload",
                    "tags": None,
                }
            ]
        }
    )

    result = provider.search("ab" * 32)

    assert result.infrastructure == []
    sample = result.samples[0]
    assert sample.hash == "ab" * 32
    assert sample.type == "unknown"
    assert sample.capabilities == []
    assert sample.tags == []
    assert sample.confidence == 75


@patch("requests.post")
def test_no_result_payload_yields_empty(mock_post, provider):
    """Test the string payload ThreatFox returns when nothing matches."""
    mock_post.return_value = _response(
        payload={"query_status": "no_result", "data": "Your search did not yield any results"}
    )

    assert provider.search("nothing").is_empty


@patch("requests.post")
def test_http_error_yields_empty(mock_post, provider):
    """Test that a non-200 response yields an empty result."""
    mock_post.return_value = _response(status_code=503)

    assert provider.search("RedLine").is_empty


@patch("requests.post")
def test_transport_error_is_absorbed(mock_post, provider):
    """Test that search() never raises."""
    mock_post.side_effect = ConnectionError("network unreachable")

    assert provider.search("RedLine").is_empty


@patch("requests.post")
def test_malformed_record_is_skipped(mock_post, provider):
    """Test that one bad record does not lose the rest."""
    mock_post.return_value = _response(
        payload={
            "data": [
                {"ioc_type": "domain", "malware": "RedLine"},
                {"id": "2", "ioc": "1.2.3.4:443", "ioc_type": "ip:port", "malware": "Vidar"},
            ]
        }
    )

    result = provider.search("x")

    assert [n.value for n in result.infrastructure] == ["1.2.3.4:443"]
    assert [s.family for s in result.samples] == ["Vidar"]


@patch("requests.post")
def test_cancelled_context_skips_request(mock_post, provider):
    """Test that a cancelled request issues no HTTP call."""
    context = RequestContext()
    context.cancel()

    assert provider.search("RedLine", context).is_empty
    mock_post.assert_not_called()
