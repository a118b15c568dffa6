from __future__ import annotations

from typing import Any

import pytest

from pybussense.config import BusSenseConfig
from pybussense.models.route import Route
from pybussense.models.spot import RouteSpot
from pybussense.models.vehicle import Vehicle
from pybussense.pipeline import DirectionResolver
from pybussense.repository import InMemoryVehicleRepository
from pybussense.sense.strategies import GeometricStrategy, TemporalStrategy
from pybussense.state.history import HistoryCache
from pybussense.state.store import InMemoryHistoryStore


def _vehicle(vehicle_id: str, line_id: str, lat: float = 0.0, lon: float = 0.0) -> Vehicle:
    return Vehicle(id=vehicle_id, line_id=line_id, latitude=lat, longitude=lon)


ROUTES: dict[str, Route | None] = {
    "100": Route(line_id="100", description="Downtown X Airport", spots=(RouteSpot(latitude=0, longitude=0),)),
    "200": Route(line_id="200", description="Broken", spots=(RouteSpot(latitude=0, longitude=0, returning=True),)),
    "300": None,
}


def _resolver(**overrides: Any) -> DirectionResolver:
    config = BusSenseConfig(strategy="geometric", max_workers=2, **overrides)
    return DirectionResolver(config, history=HistoryCache(InMemoryHistoryStore()))


@pytest.mark.asyncio
async def test_empty_snapshot_is_success() -> None:
    report = await _resolver().process([], ROUTES)

    assert report.processed == 0
    assert report.failed == []


@pytest.mark.asyncio
async def test_failures_are_isolated_per_vehicle() -> None:
    vehicles = [_vehicle("A1", "100"), _vehicle("A2", "200"), _vehicle("A3", "300"), _vehicle("A4", "100")]

    report = await _resolver().process(vehicles, ROUTES)

    senses = {vehicle.id: vehicle.sense for vehicle in report.vehicles}
    assert senses == {
        "A1": "Downtown X Airport",
        "A2": "unknown",
        "A3": "unavailable",
        "A4": "Downtown X Airport",
    }
    assert report.failed == ["A2"]
    assert report.missing_routes == {"300"}


@pytest.mark.asyncio
async def test_blank_line_skips_inference() -> None:
    report = await _resolver().process([_vehicle("A1", "")], ROUTES)

    (vehicle,) = report.vehicles
    assert vehicle.line_id == "undefined"
    assert vehicle.sense == "unknown"
    assert report.failed == []
    assert report.missing_routes == set()


def test_line_strategy_override() -> None:
    resolver = _resolver(line_strategies={"200": "temporal"})

    assert isinstance(resolver.strategy_for("100"), GeometricStrategy)
    assert isinstance(resolver.strategy_for("200"), TemporalStrategy)


@pytest.mark.asyncio
async def test_resolve_routes_fetches_each_line_once() -> None:
    calls: list[str] = []

    async def fetch(line_id: str) -> Route | None:
        calls.append(line_id)
        if line_id == "boom":
            raise RuntimeError("provider exploded")
        return ROUTES.get(line_id)

    routes = await _resolver().resolve_routes(["100", "100", "300", "", "boom"], fetch)

    assert sorted(calls) == ["100", "300", "boom"]
    assert routes["100"] is not None
    assert routes["300"] is None
    assert routes["boom"] is None


@pytest.mark.asyncio
async def test_repository_find_or_create_does_not_duplicate() -> None:
    repository = InMemoryVehicleRepository()
    first = _vehicle("A1", "100").with_sense("Downtown X Airport")
    moved = _vehicle("A1", "100", lat=1.0).with_sense("Downtown X Airport")

    await repository.save_snapshot([first])
    await repository.save_snapshot([first])
    await repository.save_snapshot([moved])

    assert repository.current == [moved]
    assert repository.history_for("A1") == [first, moved]


@pytest.mark.asyncio
async def test_repository_snapshot_replaces_previous() -> None:
    repository = InMemoryVehicleRepository()

    await repository.save_snapshot([_vehicle("A1", "100"), _vehicle("A2", "100")])
    saved = await repository.save_snapshot([_vehicle("A2", "100")])

    assert saved == 1
    assert repository.get("A1") is None
    assert repository.get("A2") is not None
