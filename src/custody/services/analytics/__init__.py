"""Product analytics."""

from src.custody.services.analytics.posthog import PostHogService

__all__ = ["PostHogService"]
