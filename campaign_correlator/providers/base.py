"""Abstract base class for intelligence provider adapters."""

import logging
import threading
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Iterable, List, Mapping, Optional

from campaign_correlator.config.settings import Settings
from campaign_correlator.models.family import FamilyProfile
from campaign_correlator.models.signals import SAMPLE_TYPES, ProviderResult, SampleType

logger = logging.getLogger(__name__)


class RequestContext:
    """
    Deadline and cancellation flag for one correlation request.

    Adapters check ``cancelled`` before issuing a request and cap their HTTP
    timeout with ``remaining()``.
    """

    def __init__(
        self,
        timeout: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> None:
        """
        Initialize request context.

        Args:
            timeout: Seconds until the deadline (no deadline if None)
            cancel_event: Optional event shared with the caller to cancel the request
        """
        self.deadline = time.monotonic() + timeout if timeout is not None else None
        self.cancel_event = cancel_event or threading.Event()

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline, or None without a deadline."""
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.monotonic())

    @property
    def cancelled(self) -> bool:
        if self.cancel_event.is_set():
            return True
        remaining = self.remaining()
        return remaining is not None and remaining <= 0

    def cancel(self) -> None:
        self.cancel_event.set()


class BaseProvider(ABC):
    """Abstract base class for all provider adapters."""

    name: str = "base"

    def __init__(self, settings: Settings, families: Mapping[str, FamilyProfile]) -> None:
        """
        Initialize provider.

        Args:
            settings: Application settings with provider configuration
            families: Malware family knowledge base used to type samples
        """
        self.settings = settings
        self.families = families

    @abstractmethod
    def fetch(self, query: str, context: RequestContext) -> ProviderResult:
        """
        Query the provider and normalize its response.

        Args:
            query: Free-text indicator (domain, hash, family name, ...)
            context: Request deadline and cancellation flag

        Returns:
            Normalized samples and infrastructure

        Raises:
            Any transport or decoding error; ``search`` absorbs them.
        """
        pass

    def search(self, query: str, context: Optional[RequestContext] = None) -> ProviderResult:
        """
        Query the provider, never raising.

        Returns:
            Normalized result, or an empty result on any failure or cancellation
        """
        context = context or RequestContext()
        if context.cancelled:
            logger.warning(f"[{self.name}] Skipped: request cancelled or past deadline")
            return ProviderResult()

        try:
            result = self.fetch(query, context)
        except Exception as e:
            logger.error(f"[{self.name}] Error querying provider: {e}", exc_info=True)
            return ProviderResult()

        logger.info(
            f"[{self.name}] {len(result.samples)} samples, "
            f"{len(result.infrastructure)} infrastructure nodes"
        )
        return result

    def request_timeout(self, context: RequestContext) -> float:
        """HTTP timeout capped by the time left before the deadline."""
        remaining = context.remaining()
        if remaining is None:
            return self.settings.request_timeout
        return max(0.1, min(self.settings.request_timeout, remaining))

    def sample_type_for(self, family: str) -> SampleType:
        profile = self.families.get(family)
        if profile and profile.type in SAMPLE_TYPES:
            return profile.type  # type: ignore[return-value]
        return "unknown"

    def capabilities_for(self, family: str) -> List[str]:
        profile = self.families.get(family)
        return list(profile.capabilities) if profile else []

    def parse_rows(self, rows: Iterable[Any], parser: Callable[[Any], None]) -> None:
        """Feed each row to ``parser``, skipping rows that fail validation."""
        for row in rows:
            try:
                parser(row)
            except (ValueError, TypeError, KeyError, AttributeError) as e:
                logger.debug(f"[{self.name}] Skipping malformed record: {e}")


def clamp_confidence(value: Any, default: int) -> int:
    """Coerce a provider confidence value into [0, 100]."""
    try:
        confidence = int(value)
    except (TypeError, ValueError):
        return default
    return max(0, min(100, confidence))


def as_list(value: Any) -> List[str]:
    """Coerce a provider tag field (list, None or scalar) into a list of strings."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value if v is not None]
    return [str(value)]
