"""Configuration management for the campaign correlator."""

from campaign_correlator.config.loader import get_knowledge_base, load_family_profiles_from_file
from campaign_correlator.config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings", "get_knowledge_base", "load_family_profiles_from_file"]
