"""Route (itinerary) ingestion + parsing.

The provider publishes one CSV of GTFS-like shapes per line, e.g.::

    linha,descricao,agencia,sequencia,shape_id,latitude,longitude
    474,JACARE X COPACABANA,...,0,1234,-22.88,-43.27

Columns are matched by header name, case-insensitively.
"""

from __future__ import annotations

import csv
import io
import logging
from typing import Any

from pybussense._constants import LINE_PLACEHOLDER
from pybussense._transport import Transport
from pybussense.config import BusSenseConfig
from pybussense.exceptions import UpstreamFetchError
from pybussense.ingestion.normalize import safe_bool, safe_float, safe_str
from pybussense.models.route import Route
from pybussense.models.spot import RouteSpot

_logger = logging.getLogger(__name__)

_DESCRIPTION_KEYS = ("descricao", "description")
_SEQUENCE_KEYS = ("sequencia", "sequence", "shape_pt_sequence")
_SHAPE_KEYS = ("shape_id", "shape")
_RETURNING_KEYS = ("returning", "sentido", "volta")
_LATITUDE_KEYS = ("latitude", "lat", "shape_pt_lat")
_LONGITUDE_KEYS = ("longitude", "lon", "lng", "shape_pt_lon")


def _first(row: dict[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        if key in row:
            return row[key]
    return None


def route_path(config: BusSenseConfig, line_id: str) -> str:
    return config.route_path_template.replace(LINE_PLACEHOLDER, line_id)


def parse_route_csv(line_id: str, text: str) -> Route | None:
    """Build a :class:`Route` from the CSV shapes of one line.

    Waypoints are ordered by the sequence column when it exists. The
    return leg comes from an explicit ``returning``/``sentido`` column when
    present; otherwise every waypoint whose shape id differs from the
    first row's belongs to the return leg.

    Returns ``None`` when the CSV carries no description.
    """
    reader = csv.DictReader(io.StringIO(text.lstrip("\ufeff")))
    if reader.fieldnames is None:
        return None
    reader.fieldnames = [name.strip().lower() for name in reader.fieldnames]
    has_returning_column = any(key in reader.fieldnames for key in _RETURNING_KEYS)

    description: str | None = None
    first_shape: str | None = None
    rows: list[tuple[float, int, RouteSpot]] = []
    for index, row in enumerate(reader):
        if description is None:
            description = safe_str(_first(row, _DESCRIPTION_KEYS))

        latitude = safe_float(_first(row, _LATITUDE_KEYS))
        longitude = safe_float(_first(row, _LONGITUDE_KEYS))
        if latitude is None or longitude is None:
            continue

        shape = safe_str(_first(row, _SHAPE_KEYS))
        if first_shape is None:
            first_shape = shape
        if has_returning_column:
            returning = safe_bool(_first(row, _RETURNING_KEYS))
        else:
            returning = shape != first_shape

        sequence = safe_float(_first(row, _SEQUENCE_KEYS))
        spot = RouteSpot(latitude=latitude, longitude=longitude, returning=returning)
        rows.append((sequence if sequence is not None else float(index), index, spot))

    if description is None:
        return None

    # Sequence numbers restart per shape, so order within each leg only.
    rows.sort(key=lambda item: (item[2].returning, item[0], item[1]))
    return Route(line_id=line_id, description=description, spots=tuple(spot for _, _, spot in rows))


async def fetch_route(config: BusSenseConfig, transport: Transport, line_id: str) -> Route | None:
    """Download and parse the route of *line_id*.

    Returns ``None`` when the provider has no route for the line or the
    request fails.
    """
    path = route_path(config, line_id)
    try:
        text = await transport.get_text(path)
    except UpstreamFetchError as exc:
        _logger.warning("Route for line %s unavailable: %s", line_id, exc)
        return None

    route = parse_route_csv(line_id, text)
    if route is None:
        _logger.warning("Route CSV for line %s has no description", line_id)
    else:
        _logger.debug("Loaded route for line %s with %d waypoints", line_id, len(route.spots))
    return route
