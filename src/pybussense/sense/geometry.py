"""Nearest-waypoint matching on planar coordinates.

Latitude/longitude are treated as planar x/y. Only the relative ordering
of distances matters, so squared Euclidean distance is used throughout.
"""

from __future__ import annotations

from pybussense._constants import PRECISION_FACTOR
from pybussense.exceptions import EmptyRouteGeometryError
from pybussense.models.route import Route
from pybussense.models.spot import RouteSpot, Spot


def squared_distance(a: Spot, b: Spot, *, factor: float = 1) -> float:
    """Squared Euclidean distance between *a* and *b*, coordinates scaled by *factor*."""
    d_lat = (a.latitude - b.latitude) * factor
    d_lon = (a.longitude - b.longitude) * factor
    return d_lat * d_lat + d_lon * d_lon


def nearest(vehicle: Spot, route: Route) -> RouteSpot:
    """Return the waypoint of *route* closest to *vehicle*.

    Ties keep the first waypoint in route order.

    Raises :class:`EmptyRouteGeometryError` when the route has no waypoints.
    """
    if not route.spots:
        raise EmptyRouteGeometryError(route.line_id)

    best = route.spots[0]
    best_distance = squared_distance(vehicle, best, factor=PRECISION_FACTOR)
    for spot in route.spots[1:]:
        distance = squared_distance(vehicle, spot, factor=PRECISION_FACTOR)
        if distance < best_distance:
            best, best_distance = spot, distance
    return best
