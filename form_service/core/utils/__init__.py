"""Small, dependency-free helpers used across the service."""

from .fallback import first_available, positive_or_none

__all__ = ["first_available", "positive_or_none"]
