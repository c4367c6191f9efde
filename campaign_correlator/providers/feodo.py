"""Feodo Tracker botnet C2 blocklist adapter."""

import logging

import requests

from campaign_correlator.models.signals import InfrastructureNode, ProviderResult
from campaign_correlator.providers.base import BaseProvider, RequestContext

logger = logging.getLogger(__name__)


class FeodoTrackerProvider(BaseProvider):
    """
    Filters the Feodo Tracker recommended C2 blocklist.

    An entry matches when its IP contains the query or its malware name contains
    the query (case-insensitive). Reports infrastructure only.
    """

    name = "FeodoTracker"

    def fetch(self, query: str, context: RequestContext) -> ProviderResult:
        response = requests.get(
            self.settings.feodo_url,
            headers=self.settings.auth_headers,
            timeout=self.request_timeout(context),
        )

        if response.status_code != 200:
            logger.error(f"Feodo Tracker download failed: {response.status_code}")
            return ProviderResult()

        data = response.json()
        result = ProviderResult()
        if not isinstance(data, list):
            return result

        needle = query.lower()
        matches = [
            item
            for item in data
            if isinstance(item, dict)
            and (
                query in (item.get("ip_address") or "")
                or needle in (item.get("malware") or "").lower()
            )
        ]

        def parse(c2: dict) -> None:
            as_number = c2.get("as_number")
            result.infrastructure.append(
                InfrastructureNode(
                    id=f"feodo-{c2['ip_address']}",
                    type="c2",
                    value=c2["ip_address"],
                    port=c2.get("port"),
                    country=c2.get("country") or "Unknown",
                    asn=str(as_number) if as_number is not None else None,
                    asn_org=c2.get("as_name"),
                    first_seen=c2.get("first_seen"),
                    last_seen=c2.get("last_online"),
                    status="active" if c2.get("status") == "online" else "inactive",
                )
            )

        self.parse_rows(matches, parse)
        return result
