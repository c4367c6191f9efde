"""Tests for the MalwareBazaar adapter."""

from unittest.mock import MagicMock, patch

from campaign_correlator.providers.malwarebazaar import MalwareBazaarProvider


@patch("requests.post")
def test_search_maps_samples(mock_post, settings, families):
    """Test tag search results become samples with download-based confidence."""
    response = MagicMock()
    response.status_code = 200
    response.json.return_value = {
        "query_status": "ok",
        "data": [
            {
                "sha256_hash": "aa" * 32,
                "signature": "LockBit",
                "first_seen": "2024-04-01 00:00:00",
                "last_seen": None,
                "tags": ["lockbit", "ransomware"],
                "intelligence": {"downloads": "42"},
            },
            {
                "sha256_hash": "bb" * 32,
                "signature": None,
                "first_seen": "2024-04-02 00:00:00",
                "intelligence": {"downloads": "3"},
            },
        ],
    }
    mock_post.return_value = response

    result = MalwareBazaarProvider(settings, families).search("lockbit")

    assert result.infrastructure == []
    lockbit, unknown = result.samples
    assert lockbit.id == "mb-" + "aa" * 32
    assert lockbit.type == "ransomware"
    assert lockbit.confidence == 90
    assert lockbit.last_seen == "2024-04-01 00:00:00"
    assert lockbit.source == "MalwareBazaar"
    assert unknown.family == "Unknown"
    assert unknown.type == "unknown"
    assert unknown.confidence == 70

    _, kwargs = mock_post.call_args
    assert kwargs["data"] == {"query": "get_taginfo", "tag": "lockbit", "limit": "50"}


@patch("requests.post")
def test_http_error_yields_empty(mock_post, settings, families):
    """Test a failed request."""
    response = MagicMock()
    response.status_code = 401
    response.text = "unauthorized"
    mock_post.return_value = response

    assert MalwareBazaarProvider(settings, families).search("lockbit").is_empty
