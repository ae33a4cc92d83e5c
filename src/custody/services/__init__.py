"""Shared services module for external integrations."""

from src.custody.services.analytics import PostHogService

__all__ = [
    "PostHogService",
]
