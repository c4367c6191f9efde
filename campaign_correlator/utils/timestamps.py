"""Tolerant timestamp parsing for provider-reported dates."""

import logging
import math
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Union

logger = logging.getLogger(__name__)

TimestampLike = Union[str, datetime, None]

# Formats seen in abuse.ch feeds besides ISO 8601
_FALLBACK_FORMATS = [
    "%Y-%m-%d %H:%M:%S %Z",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d",
]


def parse_timestamp(value: TimestampLike) -> Optional[datetime]:
    """
    Parse a provider timestamp into an aware UTC datetime.

    Naive values are assumed to be UTC.

    Args:
        value: ISO 8601 string, "YYYY-MM-DD HH:MM:SS[ UTC]" string, or datetime

    Returns:
        Aware datetime, or None when the value is missing or unparseable
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value).strip()
        if not text:
            return None
        parsed = _parse_text(text)
        if parsed is None:
            logger.debug(f"Ignoring unparseable timestamp: {value!r}")
            return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _parse_text(text: str) -> Optional[datetime]:
    iso_text = text[:-1] + "+00:00" if text.endswith("Z") else text
    try:
        return datetime.fromisoformat(iso_text)
    except ValueError:
        pass

    for fmt in _FALLBACK_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


def parse_valid(values: Iterable[TimestampLike]) -> List[datetime]:
    """Parse every value, dropping the ones that are missing or unparseable."""
    parsed = (parse_timestamp(value) for value in values)
    return [ts for ts in parsed if ts is not None]


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))
