"""
Campaign Correlator - malware campaign correlation over public threat-intelligence feeds.

This package gathers malware-sample and infrastructure signals from several
intelligence providers, groups them into campaigns by malware family, and
discovers relationships between campaigns (shared infrastructure, overlapping
TTPs, overlapping activity windows).
"""

__version__ = "1.0.0"

from campaign_correlator.core import CorrelationOrchestrator, correlate_campaigns
from campaign_correlator.models.campaign import Campaign
from campaign_correlator.models.correlation import CorrelationResult
from campaign_correlator.models.signals import InfrastructureNode, MalwareSampleSignal

__all__ = [
    "Campaign",
    "CorrelationOrchestrator",
    "CorrelationResult",
    "InfrastructureNode",
    "MalwareSampleSignal",
    "correlate_campaigns",
]
