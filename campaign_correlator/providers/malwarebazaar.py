"""MalwareBazaar tag search adapter."""

import logging

import requests

from campaign_correlator.models.signals import MalwareSampleSignal, ProviderResult
from campaign_correlator.providers.base import BaseProvider, RequestContext, as_list

logger = logging.getLogger(__name__)


class MalwareBazaarProvider(BaseProvider):
    """Fetches samples tagged with the query from MalwareBazaar. Reports no infrastructure."""

    name = "MalwareBazaar"

    def fetch(self, query: str, context: RequestContext) -> ProviderResult:
        response = requests.post(
            self.settings.malwarebazaar_url,
            headers=self.settings.auth_headers,
            data={
                "query": "get_taginfo",
                "tag": query,
                "limit": str(self.settings.malwarebazaar_limit),
            },
            timeout=self.request_timeout(context),
        )

        if response.status_code != 200:
            logger.error(f"MalwareBazaar query failed: {response.status_code} - {response.text}")
            return ProviderResult()

        data = response.json().get("data")
        result = ProviderResult()
        if not isinstance(data, list):
            return result

        def parse(sample: dict) -> None:
            family = sample.get("signature") or "Unknown"
            downloads = (sample.get("intelligence") or {}).get("downloads") or 0
            first_seen = sample.get("first_seen")
            result.samples.append(
                MalwareSampleSignal(
                    id=f"mb-{sample['sha256_hash']}",
                    hash=sample["sha256_hash"],
                    hash_type="sha256",
                    family=family,
                    type=self.sample_type_for(family),
                    capabilities=self.capabilities_for(family),
                    first_seen=first_seen,
                    last_seen=sample.get("last_seen") or first_seen,
                    source=self.name,
                    tags=as_list(sample.get("tags")),
                    confidence=90 if int(downloads) > 10 else 70,
                )
            )

        self.parse_rows(data, parse)
        return result
