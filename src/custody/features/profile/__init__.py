"""User profile reads."""

from src.custody.features.profile.handlers import router

__all__ = ["router"]
