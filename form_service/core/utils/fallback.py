"""Ordered fallback providers for layered defaults.

A value such as the geospatial search radius is resolved from the request,
then from service configuration, then from a hardcoded constant. Each layer
is a zero-argument callable returning ``None`` to defer to the next one, so
later layers are never evaluated once an earlier one answers.

Example:
    radius = first_available(
        lambda: requested_radius,
        lambda: positive_or_none(settings.default_location_radius),
        lambda: DEFAULT_LOCATION_RADIUS_METERS,
    )
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar

T = TypeVar("T")

Provider = Callable[[], T | None]


def first_available(*providers: Provider[T]) -> T:
    """Return the first non-``None`` value produced by ``providers``.

    Args:
        *providers: Callables evaluated in order, lazily.

    Returns:
        The first value that is not ``None``.

    Raises:
        LookupError: If every provider deferred.
    """
    for provider in providers:
        value = provider()
        if value is not None:
            return value
    msg = "No fallback provider produced a value"
    raise LookupError(msg)


def positive_or_none(value: int | None) -> int | None:
    """Treat unset and non-positive configuration values as absent."""
    if value is None or value <= 0:
        return None
    return value
