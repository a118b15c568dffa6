"""Data models for routes, vehicles and position history."""

from pybussense.models.history import HistoryRecord
from pybussense.models.route import Route
from pybussense.models.spot import RouteSpot, Spot
from pybussense.models.state import PositionState
from pybussense.models.vehicle import Vehicle

__all__ = [
    "HistoryRecord",
    "PositionState",
    "Route",
    "RouteSpot",
    "Spot",
    "Vehicle",
]
