from __future__ import annotations

import pytest

from pybussense.exceptions import EmptyRouteGeometryError
from pybussense.models.route import Route
from pybussense.models.spot import RouteSpot, Spot
from pybussense.sense.geometry import nearest, squared_distance


def _route(*spots: RouteSpot) -> Route:
    return Route(line_id="474", description="Jacare X Copacabana", spots=spots)


def test_squared_distance_scales_coordinates() -> None:
    a = Spot(latitude=0.0, longitude=0.0)
    b = Spot(latitude=3.0, longitude=4.0)

    assert squared_distance(a, b) == 25.0
    assert squared_distance(a, b, factor=10) == 2500.0


def test_single_waypoint_is_always_nearest() -> None:
    only = RouteSpot(latitude=-22.9, longitude=-43.2, returning=True)
    route = _route(only)

    for lat, lon in ((0.0, 0.0), (-22.9, -43.2), (45.0, 120.0)):
        assert nearest(Spot(latitude=lat, longitude=lon), route) == only


def test_nearest_picks_closest_waypoint() -> None:
    route = _route(
        RouteSpot(latitude=-22.90, longitude=-43.20),
        RouteSpot(latitude=-22.95, longitude=-43.25),
        RouteSpot(latitude=-22.99, longitude=-43.29, returning=True),
    )

    match = nearest(Spot(latitude=-22.98, longitude=-43.28), route)

    assert match.latitude == -22.99
    assert match.returning is True


def test_tie_keeps_first_waypoint() -> None:
    first = RouteSpot(latitude=1.0, longitude=0.0, returning=False)
    second = RouteSpot(latitude=-1.0, longitude=0.0, returning=True)

    assert nearest(Spot(latitude=0.0, longitude=0.0), _route(first, second)) == first


def test_empty_route_raises() -> None:
    with pytest.raises(EmptyRouteGeometryError) as info:
        nearest(Spot(latitude=0.0, longitude=0.0), _route())
    assert info.value.line_id == "474"
