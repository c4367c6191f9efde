"""URLhaus URL lookup adapter."""

import logging

import requests

from campaign_correlator.models.signals import InfrastructureNode, MalwareSampleSignal, ProviderResult
from campaign_correlator.providers.base import BaseProvider, RequestContext, as_list

logger = logging.getLogger(__name__)

URLHAUS_CONFIDENCE = 80


class URLhausProvider(BaseProvider):
    """Looks up malware distribution URLs on URLhaus."""

    name = "URLhaus"

    def fetch(self, query: str, context: RequestContext) -> ProviderResult:
        response = requests.post(
            self.settings.urlhaus_url,
            headers=self.settings.auth_headers,
            data={"url": query},
            timeout=self.request_timeout(context),
        )

        if response.status_code != 200:
            logger.error(f"URLhaus lookup failed: {response.status_code} - {response.text}")
            return ProviderResult()

        urls = response.json().get("urls")
        result = ProviderResult()
        if not isinstance(urls, list):
            return result

        def parse(entry: dict) -> None:
            date_added = entry.get("date_added")
            result.infrastructure.append(
                InfrastructureNode(
                    id=f"uh-{entry['id']}",
                    type="dropper",
                    value=entry["url"],
                    first_seen=date_added,
                    last_seen=date_added,
                    status="active" if entry.get("url_status") == "online" else "inactive",
                )
            )

            threat = entry.get("threat")
            if threat:
                payloads = entry.get("payloads") or []
                result.samples.append(
                    MalwareSampleSignal(
                        id=f"uh-sample-{entry['id']}",
                        hash=(payloads[0].get("sha256_hash") or "") if payloads else "",
                        hash_type="sha256",
                        family=threat,
                        type="infostealer" if "stealer" in threat.lower() else "loader",
                        capabilities=[],
                        first_seen=date_added,
                        last_seen=date_added,
                        source=self.name,
                        tags=as_list(entry.get("tags")),
                        confidence=URLHAUS_CONFIDENCE,
                    )
                )

        self.parse_rows(urls, parse)
        return result
