"""Position state enum."""

from __future__ import annotations

import enum


class PositionState(enum.IntEnum):
    """Movement of a vehicle relative to the start point of its route."""

    APPROACHING = -1
    """Moving toward the route start (returning leg)."""
    STATIONARY = 0
    """No measurable movement, or not enough data."""
    RECEDING = 1
    """Moving away from the route start (outbound leg)."""
