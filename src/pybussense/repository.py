"""Persistence of processed vehicle records.

A repository keeps two collections:

* the *current* snapshot, one record per vehicle id, replaced on every cycle;
* the *history* of every distinct observed state, written with
  find-or-create semantics so an identical state is never stored twice.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any, Protocol

from pybussense.models.vehicle import Vehicle

_logger = logging.getLogger(__name__)


class VehicleRepository(Protocol):
    async def save_snapshot(self, vehicles: Iterable[Vehicle]) -> int:
        """Persist a cycle's vehicles and return how many were saved."""
        ...


class InMemoryVehicleRepository:
    """Dict-backed repository."""

    def __init__(self) -> None:
        self._current: dict[str, Vehicle] = {}
        self._history: dict[tuple[str, tuple[Any, ...]], Vehicle] = {}

    def find_or_create(self, vehicle: Vehicle) -> Vehicle:
        """Return the stored history entry equal to *vehicle*, creating it if needed."""
        key = (vehicle.id, vehicle.observation_key)
        existing = self._history.get(key)
        if existing is not None:
            return existing
        self._history[key] = vehicle
        return vehicle

    async def save_snapshot(self, vehicles: Iterable[Vehicle]) -> int:
        self._current.clear()
        saved = 0
        for vehicle in vehicles:
            self._current[vehicle.id] = self.find_or_create(vehicle)
            saved += 1
        _logger.info("%d records saved successfully.", saved)
        return saved

    def get(self, vehicle_id: str) -> Vehicle | None:
        return self._current.get(vehicle_id)

    @property
    def current(self) -> list[Vehicle]:
        return list(self._current.values())

    def history_for(self, vehicle_id: str) -> list[Vehicle]:
        return [vehicle for (key, _), vehicle in self._history.items() if key == vehicle_id]
