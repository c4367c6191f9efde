"""ThreatFox IOC search adapter."""

import logging

import requests

from campaign_correlator.models.signals import InfrastructureNode, MalwareSampleSignal, ProviderResult
from campaign_correlator.providers.base import BaseProvider, RequestContext, as_list, clamp_confidence

logger = logging.getLogger(__name__)

NETWORK_IOC_MARKERS = ("ip", "domain", "url")
HASH_TYPES = ("sha256", "sha1", "md5")


class ThreatFoxProvider(BaseProvider):
    """Searches ThreatFox for IOCs matching the query."""

    name = "ThreatFox"

    def fetch(self, query: str, context: RequestContext) -> ProviderResult:
        response = requests.post(
            self.settings.threatfox_url,
            headers={"Content-Type": "application/json", **self.settings.auth_headers},
            json={"query": "search_ioc", "search_term": query},
            timeout=self.request_timeout(context),
        )

        if response.status_code != 200:
            logger.error(f"ThreatFox search failed: {response.status_code} - {response.text}")
            return ProviderResult()

        data = response.json().get("data")
        result = ProviderResult()
        if not isinstance(data, list):
            # ThreatFox answers "no_result" with a string payload
            return result

        def parse(ioc: dict) -> None:
            ioc_type = ioc.get("ioc_type") or ""
            first_seen = ioc.get("first_seen")
            last_seen = ioc.get("last_seen")

            if any(marker in ioc_type for marker in NETWORK_IOC_MARKERS):
                result.infrastructure.append(
                    InfrastructureNode(
                        id=f"tf-{ioc['id']}",
                        type="c2" if ioc.get("threat_type") == "botnet_cc" else "dropper",
                        value=ioc["ioc"],
                        country=ioc.get("reporter_country") or "Unknown",
                        first_seen=first_seen,
                        last_seen=last_seen,
                        status="active" if ioc.get("is_active") else "inactive",
                    )
                )

            family = ioc.get("malware")
            if family:
                is_hash = "hash" in ioc_type
                hash_type = next((h for h in HASH_TYPES if ioc_type.startswith(h)), "sha256")
                result.samples.append(
                    MalwareSampleSignal(
                        id=f"tf-sample-{ioc['id']}",
                        hash=ioc["ioc"] if is_hash else "",
                        hash_type=hash_type,
                        family=family,
                        type=self.sample_type_for(family),
                        capabilities=self.capabilities_for(family),
                        first_seen=first_seen,
                        last_seen=last_seen,
                        source=self.name,
                        tags=as_list(ioc.get("tags")),
                        confidence=clamp_confidence(ioc.get("confidence_level"), 75),
                    )
                )

        self.parse_rows(data, parse)
        return result
