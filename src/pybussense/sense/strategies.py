"""Interchangeable sense inference strategies.

Both strategies expose ``infer(vehicle, route) -> Vehicle``:

* :class:`GeometricStrategy` matches the vehicle against the nearest route
  waypoint and uses that waypoint's leg. Stateless, but sensitive to
  sparse waypoint sampling.
* :class:`TemporalStrategy` keeps a bounded history of positions per
  vehicle and looks for consecutive movements away from or toward the
  route start. Stateful and tolerant of single-sample noise.

Neither raises for missing route data or empty geometry: the vehicle gets
the ``unavailable`` label and the condition is logged. A malformed route
description propagates as :class:`MalformedDescriptionError`.
"""

from __future__ import annotations

import logging
from typing import Protocol

from pybussense._constants import SENSE_UNAVAILABLE, SENSE_UNKNOWN, STRATEGY_GEOMETRIC, STRATEGY_TEMPORAL
from pybussense.exceptions import BusSenseConfigError
from pybussense.models.route import Route
from pybussense.models.state import PositionState
from pybussense.models.vehicle import Vehicle
from pybussense.sense.classifier import classify_timeline
from pybussense.sense.geometry import nearest
from pybussense.sense.reducer import reduce_states
from pybussense.sense.resolver import resolve_sense
from pybussense.state.history import HistoryCache

_logger = logging.getLogger(__name__)


class DirectionStrategy(Protocol):
    """Structural interface shared by all strategies."""

    async def infer(self, vehicle: Vehicle, route: Route | None) -> Vehicle:
        ...


class _BaseStrategy:
    def __init__(self, *, unknown_sense: str = SENSE_UNKNOWN, unavailable_sense: str = SENSE_UNAVAILABLE) -> None:
        self._unknown = unknown_sense
        self._unavailable = unavailable_sense

    def _usable_route(self, vehicle: Vehicle, route: Route | None) -> Route | None:
        """Return *route* if it can drive inference, logging why it cannot otherwise."""
        if route is None:
            _logger.warning("Line %s has no route data (vehicle %s)", vehicle.line_id, vehicle.id)
            return None
        if not route.spots:
            _logger.warning("Route for line %s has no waypoints (vehicle %s)", route.line_id, vehicle.id)
            return None
        return route


class GeometricStrategy(_BaseStrategy):
    """Use the leg of the nearest route waypoint."""

    async def infer(self, vehicle: Vehicle, route: Route | None) -> Vehicle:
        usable = self._usable_route(vehicle, route)
        if usable is None:
            return vehicle.with_sense(self._unavailable)

        spot = nearest(vehicle.position, usable)
        signal = PositionState.APPROACHING if spot.returning else PositionState.RECEDING
        _logger.debug("Vehicle %s nearest waypoint returning=%s", vehicle.id, spot.returning)
        return vehicle.with_sense(resolve_sense(usable.description, signal, unknown=self._unknown))


class TemporalStrategy(_BaseStrategy):
    """Smooth the direction over the vehicle's recent positions."""

    def __init__(
        self,
        history: HistoryCache,
        *,
        unknown_sense: str = SENSE_UNKNOWN,
        unavailable_sense: str = SENSE_UNAVAILABLE,
    ) -> None:
        super().__init__(unknown_sense=unknown_sense, unavailable_sense=unavailable_sense)
        self._history = history

    async def infer(self, vehicle: Vehicle, route: Route | None) -> Vehicle:
        usable = self._usable_route(vehicle, route)
        if usable is None:
            return vehicle.with_sense(self._unavailable)

        record = await self._history.load(vehicle.id)
        record = self._history.reconcile_start_point(record, usable.start_point)
        record = self._history.append_sample(record, vehicle.position)

        states = classify_timeline(record.timeline, record.start_point)
        signal = reduce_states(states, most_recent_last=True)
        _logger.debug("Vehicle %s states=%s signal=%s", vehicle.id, [int(s) for s in states], signal.name)
        sense = resolve_sense(usable.description, signal, unknown=self._unknown)

        await self._history.save(vehicle.id, record)
        return vehicle.with_sense(sense)


def build_strategy(
    name: str,
    *,
    history: HistoryCache | None = None,
    unknown_sense: str = SENSE_UNKNOWN,
    unavailable_sense: str = SENSE_UNAVAILABLE,
) -> DirectionStrategy:
    """Create a strategy by its configured name."""
    if name == STRATEGY_GEOMETRIC:
        return GeometricStrategy(unknown_sense=unknown_sense, unavailable_sense=unavailable_sense)
    if name == STRATEGY_TEMPORAL:
        if history is None:
            raise BusSenseConfigError("temporal strategy requires a history cache")
        return TemporalStrategy(history, unknown_sense=unknown_sense, unavailable_sense=unavailable_sense)
    raise BusSenseConfigError(f"Unknown strategy {name!r}")
