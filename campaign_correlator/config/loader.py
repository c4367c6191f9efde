"""Malware family knowledge base loading from YAML files."""

import logging
from pathlib import Path
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional

import yaml

from campaign_correlator.models.family import DetectionHint, FamilyProfile

logger = logging.getLogger(__name__)

DEFAULT_KNOWLEDGE_BASE = Path(__file__).parent.parent / "data" / "malware_families.yaml"

# Process-wide knowledge base (read-only once loaded)
_knowledge_base: Optional[Mapping[str, FamilyProfile]] = None


def load_family_profiles_from_file(filepath: str) -> Optional[Dict[str, FamilyProfile]]:
    """
    Load malware family profiles from a YAML knowledge base file.

    Args:
        filepath: Path to YAML file containing a top-level ``families`` list

    Returns:
        Mapping of family name to FamilyProfile, or None if loading fails
    """
    filepath_obj = Path(filepath)
    if not filepath_obj.exists():
        logger.error(f"Knowledge base file not found: {filepath}")
        return None

    try:
        with filepath_obj.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.error(f"Error loading knowledge base file: {e}", exc_info=True)
        return None

    if not isinstance(data, dict):
        logger.error(f"Knowledge base file {filepath} must contain a mapping")
        return None

    profiles: Dict[str, FamilyProfile] = {}
    for family_data in data.get("families") or []:
        try:
            profile = _dict_to_profile(family_data)
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            name = family_data.get("name", "unknown") if isinstance(family_data, dict) else "unknown"
            logger.error(f"Invalid family format for '{name}': {e}")
            return None
        profiles[profile.name] = profile

    logger.info(f"Loaded {len(profiles)} malware family profiles from {filepath}")
    return profiles


def _dict_to_profile(family_dict: dict) -> FamilyProfile:
    """
    Convert dictionary to FamilyProfile object.

    Raises:
        ValueError: If required fields are missing or invalid
    """
    required_fields = ["name", "type"]
    missing_fields = [field for field in required_fields if field not in family_dict]
    if missing_fields:
        raise ValueError(f"Missing required fields: {missing_fields}")

    indicators: List[DetectionHint] = [
        DetectionHint(type=str(hint["type"]), pattern=str(hint["pattern"]))
        for hint in family_dict.get("indicators") or []
    ]

    return FamilyProfile(
        name=str(family_dict["name"]),
        type=str(family_dict["type"]),
        capabilities=[str(c) for c in family_dict.get("capabilities") or []],
        kill_chain=[str(k) for k in family_dict.get("kill_chain") or []],
        ttps=[str(t) for t in family_dict.get("ttps") or []],
        indicators=indicators,
        sectors=[str(s) for s in family_dict.get("sectors") or []],
    )


def get_knowledge_base(filepath: Optional[str] = None) -> Mapping[str, FamilyProfile]:
    """
    Get the process-wide malware family knowledge base.

    The first call loads ``filepath`` (falling back to the packaged file when it
    is missing or invalid); later calls return the cached mapping.

    Returns:
        Read-only mapping of family name to FamilyProfile
    """
    global _knowledge_base
    if _knowledge_base is None:
        profiles = load_family_profiles_from_file(filepath) if filepath else None
        if profiles is None:
            if filepath:
                logger.warning("Falling back to the packaged malware family knowledge base")
            profiles = load_family_profiles_from_file(str(DEFAULT_KNOWLEDGE_BASE)) or {}
        _knowledge_base = MappingProxyType(profiles)
    return _knowledge_base


def reset_knowledge_base() -> None:
    """Drop the cached knowledge base so the next access reloads it."""
    global _knowledge_base
    _knowledge_base = None
