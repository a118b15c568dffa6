"""pybussense - infer the travel direction of buses from live position telemetry."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pybussense")
except PackageNotFoundError:
    __version__ = "0+local"
from pybussense.client import BusSenseClient
from pybussense.config import BusSenseConfig
from pybussense.exceptions import (
    BusSenseConfigError,
    BusSenseError,
    CacheError,
    CacheReadError,
    CacheWriteError,
    EmptyRouteGeometryError,
    MalformedDescriptionError,
    MissingRouteDataError,
    UpstreamFetchError,
)
from pybussense.models import HistoryRecord, PositionState, Route, RouteSpot, Spot, Vehicle
from pybussense.pipeline import CycleReport, DirectionResolver
from pybussense.repository import InMemoryVehicleRepository, VehicleRepository
from pybussense.sense import GeometricStrategy, TemporalStrategy
from pybussense.state import FileHistoryStore, HistoryCache, InMemoryHistoryStore

__all__ = [
    "__version__",
    "BusSenseClient",
    "BusSenseConfig",
    "BusSenseConfigError",
    "BusSenseError",
    "CacheError",
    "CacheReadError",
    "CacheWriteError",
    "CycleReport",
    "DirectionResolver",
    "EmptyRouteGeometryError",
    "FileHistoryStore",
    "GeometricStrategy",
    "HistoryCache",
    "HistoryRecord",
    "InMemoryHistoryStore",
    "InMemoryVehicleRepository",
    "MalformedDescriptionError",
    "MissingRouteDataError",
    "PositionState",
    "Route",
    "RouteSpot",
    "Spot",
    "TemporalStrategy",
    "UpstreamFetchError",
    "Vehicle",
    "VehicleRepository",
]
