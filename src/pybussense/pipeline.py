"""Per-cycle sense inference over a snapshot of vehicles.

:class:`DirectionResolver` picks the configured strategy per line and runs
every vehicle through it under a bounded worker pool. Vehicles are
independent: a failure in one pipeline is logged with the vehicle id and
line id, leaves that vehicle with the ``unknown`` label and never stops
the others.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field

from pybussense._constants import BLANK_LINE, BLANK_SENSE
from pybussense.config import BusSenseConfig
from pybussense.models.route import Route
from pybussense.models.vehicle import Vehicle
from pybussense.sense.strategies import DirectionStrategy, build_strategy
from pybussense.state.history import HistoryCache

_logger = logging.getLogger(__name__)

RouteFetcher = Callable[[str], Awaitable[Route | None]]


@dataclass(slots=True)
class CycleReport:
    """Outcome of one processing cycle."""

    vehicles: list[Vehicle] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    """Ids of vehicles whose inference failed."""
    missing_routes: set[str] = field(default_factory=set)
    """Line ids for which no usable route was available."""
    persisted: bool = False

    @property
    def processed(self) -> int:
        return len(self.vehicles)


class DirectionResolver:
    """Resolve the sense of every vehicle in a snapshot."""

    def __init__(
        self,
        config: BusSenseConfig,
        *,
        history: HistoryCache | None = None,
        strategies: Mapping[str, DirectionStrategy] | None = None,
    ) -> None:
        self._config = config
        if strategies is None:
            strategies = {
                name: build_strategy(
                    name,
                    history=history,
                    unknown_sense=config.unknown_sense,
                    unavailable_sense=config.unavailable_sense,
                )
                for name in {config.strategy, *config.line_strategies.values()}
            }
        self._strategies = dict(strategies)

    def strategy_for(self, line_id: str) -> DirectionStrategy:
        return self._strategies[self._config.strategy_for(line_id)]

    async def resolve_routes(self, line_ids: Iterable[str], fetch_route: RouteFetcher) -> dict[str, Route | None]:
        """Fetch each distinct line's route once. A failing fetch counts as missing data."""
        unique = sorted({line_id for line_id in line_ids if line_id})
        semaphore = asyncio.Semaphore(self._config.max_workers)

        async def _one(line_id: str) -> Route | None:
            async with semaphore:
                try:
                    return await fetch_route(line_id)
                except Exception:
                    _logger.exception("Route lookup failed for line %s", line_id)
                    return None

        routes = await asyncio.gather(*(_one(line_id) for line_id in unique))
        return dict(zip(unique, routes, strict=True))

    async def infer(self, vehicle: Vehicle, route: Route | None) -> Vehicle:
        """Infer one vehicle's sense. Vehicles without a line skip inference."""
        if not vehicle.line_id:
            return vehicle.model_copy(update={"line_id": BLANK_LINE, "sense": BLANK_SENSE})
        return await self.strategy_for(vehicle.line_id).infer(vehicle, route)

    async def process(
        self,
        vehicles: Sequence[Vehicle],
        routes: Mapping[str, Route | None],
    ) -> CycleReport:
        """Run inference over *vehicles* with at most ``max_workers`` in flight.

        An empty snapshot is a successful cycle with nothing to do.
        """
        report = CycleReport()
        if not vehicles:
            _logger.info("Nothing to process in this cycle")
            return report

        semaphore = asyncio.Semaphore(self._config.max_workers)

        async def _one(vehicle: Vehicle) -> Vehicle:
            route = routes.get(vehicle.line_id)
            if vehicle.line_id and (route is None or not route.spots):
                report.missing_routes.add(vehicle.line_id)
            async with semaphore:
                try:
                    return await self.infer(vehicle, route)
                except Exception:
                    _logger.exception("Sense inference failed for vehicle %s (line %s)", vehicle.id, vehicle.line_id)
                    report.failed.append(vehicle.id)
                    return vehicle.with_sense(self._config.unknown_sense)

        report.vehicles = list(await asyncio.gather(*(_one(vehicle) for vehicle in vehicles)))
        if report.failed:
            _logger.warning("%d of %d vehicles failed inference", len(report.failed), len(vehicles))
        return report
