"""Current vehicle positions ingestion + parsing."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from pydantic import ValidationError

from pybussense._constants import POSITION_COLUMNS
from pybussense._transport import Transport
from pybussense.config import BusSenseConfig
from pybussense.exceptions import UpstreamFetchError
from pybussense.models.vehicle import Vehicle

_logger = logging.getLogger(__name__)


def parse_positions_body(body: Any) -> list[Vehicle]:
    """Parse a ``{"COLUMNS": [...], "DATA": [[...], ...]}`` positions payload.

    Rows are mapped by column name; when the payload carries no usable
    column list the provider's documented order is assumed. Rows that
    cannot be parsed (e.g. missing coordinates) are skipped.
    """
    if not isinstance(body, dict) or not isinstance(body.get("DATA"), list):
        _logger.error("Positions payload has no DATA")
        return []
    if not body["DATA"]:
        _logger.info("Positions payload lists no vehicles")
        return []

    columns = body.get("COLUMNS")
    if isinstance(columns, list) and len(columns) <= 1:
        _logger.error("Positions payload has no usable COLUMNS")
        return []
    if not isinstance(columns, list):
        columns = list(POSITION_COLUMNS)
    names = [str(column).strip().upper() for column in columns]

    vehicles: list[Vehicle] = []
    skipped = 0
    for row in body["DATA"]:
        if not isinstance(row, list):
            skipped += 1
            continue
        try:
            vehicles.append(Vehicle.model_validate(dict(zip(names, row, strict=False))))
        except ValidationError:
            skipped += 1
            _logger.debug("Skipping unparseable position row %r", row, exc_info=True)

    if skipped:
        _logger.warning("Skipped %d of %d position rows", skipped, len(body["DATA"]))
    return vehicles


async def fetch_feed(transport: Transport, name: str, path: str) -> list[Vehicle]:
    """Fetch one positions feed. Upstream failures yield an empty list."""
    try:
        body = await transport.get_json(path)
    except UpstreamFetchError as exc:
        _logger.error("Positions feed %s failed: %s", name, exc)
        return []
    vehicles = parse_positions_body(body)
    _logger.info("Positions feed %s returned %d vehicles", name, len(vehicles))
    return vehicles


async def fetch_current_positions(config: BusSenseConfig, transport: Transport) -> list[Vehicle]:
    """Fetch every configured positions feed and merge the results.

    When the same vehicle id appears in more than one feed, the last feed
    listed in the configuration wins.
    """
    feeds = list(config.position_paths.items())
    results = await asyncio.gather(
        *(fetch_feed(transport, name, path) for name, path in feeds),
        return_exceptions=True,
    )

    merged: dict[str, Vehicle] = {}
    for (name, _), vehicles in zip(feeds, results, strict=True):
        if isinstance(vehicles, BaseException):
            if not isinstance(vehicles, Exception):
                raise vehicles
            _logger.error("Positions feed %s failed", name, exc_info=vehicles)
            continue
        for vehicle in vehicles:
            merged[vehicle.id] = vehicle
    return list(merged.values())
