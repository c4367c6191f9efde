"""Intelligence provider adapters."""

from typing import Dict, List, Mapping, Type

from campaign_correlator.config.settings import Settings
from campaign_correlator.models.family import FamilyProfile
from campaign_correlator.providers.base import BaseProvider, RequestContext
from campaign_correlator.providers.feodo import FeodoTrackerProvider
from campaign_correlator.providers.malwarebazaar import MalwareBazaarProvider
from campaign_correlator.providers.merger import merge_provider_results
from campaign_correlator.providers.threatfox import ThreatFoxProvider
from campaign_correlator.providers.urlhaus import URLhausProvider

PROVIDER_CLASSES: Dict[str, Type[BaseProvider]] = {
    "threatfox": ThreatFoxProvider,
    "urlhaus": URLhausProvider,
    "malwarebazaar": MalwareBazaarProvider,
    "feodo": FeodoTrackerProvider,
}


def get_providers(
    settings: Settings, families: Mapping[str, FamilyProfile]
) -> List[BaseProvider]:
    """
    Instantiate the providers enabled in settings.

    Args:
        settings: Application settings
        families: Malware family knowledge base

    Returns:
        Provider instances in configuration order
    """
    return [PROVIDER_CLASSES[name](settings, families) for name in settings.enabled_providers]


__all__ = [
    "BaseProvider",
    "FeodoTrackerProvider",
    "MalwareBazaarProvider",
    "RequestContext",
    "ThreatFoxProvider",
    "URLhausProvider",
    "get_providers",
    "merge_provider_results",
]
