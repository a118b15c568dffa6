"""Custom exception hierarchy for pybussense."""

from __future__ import annotations


class BusSenseError(Exception):
    """Base exception for all pybussense errors."""


class BusSenseConfigError(BusSenseError):
    """Invalid or missing configuration."""


class MissingRouteDataError(BusSenseError):
    """No route/itinerary exists for a line."""

    def __init__(self, line_id: str) -> None:
        self.line_id = line_id
        super().__init__(f"No route data for line {line_id!r}")


class EmptyRouteGeometryError(BusSenseError):
    """A route was loaded but carries no waypoints."""

    def __init__(self, line_id: str) -> None:
        self.line_id = line_id
        super().__init__(f"Route for line {line_id!r} has no waypoints")


class MalformedDescriptionError(BusSenseError):
    """Route description is not of the form ``"<origin> X <destination>"``."""

    def __init__(self, description: str) -> None:
        self.description = description
        super().__init__(f"Malformed route description: {description!r}")


class CacheError(BusSenseError):
    """History store failure."""

    def __init__(self, message: str, *, key: str = "") -> None:
        self.key = key
        super().__init__(message)


class CacheReadError(CacheError):
    """History record could not be read from the store."""


class CacheWriteError(CacheError):
    """History record could not be written to the store."""


class UpstreamFetchError(BusSenseError):
    """HTTP-level failure talking to the data provider (network, non-200, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)
