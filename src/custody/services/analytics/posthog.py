"""PostHog analytics service for provisioning events."""

import logging

import posthog

from src.custody.config import settings

logger = logging.getLogger(__name__)


class PostHogService:
    """Tracks analytics events via PostHog. No-op when no API key is configured."""

    def __init__(self) -> None:
        if settings.posthog_api_key:
            posthog.api_key = settings.posthog_api_key
            posthog.host = settings.posthog_host

    def capture(self, distinct_id: str, event: str, properties: dict | None = None) -> None:
        """
        Track an event. Delivery failures are logged and never raised.

        Args:
            distinct_id: Unique identifier for the user (Privy DID)
            event: Event name (e.g., "wallet_synced")
            properties: Optional event properties

        Example:
            >>> PostHogService().capture("did:privy:abc", "wallet_synced", {"address": "0x..."})
        """
        if not settings.posthog_api_key:
            return

        try:
            posthog.capture(distinct_id=distinct_id, event=event, properties=properties or {})
        except Exception as e:
            logger.warning(f"Failed to capture analytics event '{event}': {e}")
