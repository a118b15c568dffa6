"""High-level async client and polling service."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any

import aiohttp

from pybussense._transport import HttpTransport, Transport
from pybussense.config import BusSenseConfig
from pybussense.exceptions import BusSenseError
from pybussense.ingestion.positions import fetch_current_positions
from pybussense.ingestion.routes import fetch_route
from pybussense.models.route import Route
from pybussense.models.vehicle import Vehicle
from pybussense.pipeline import CycleReport, DirectionResolver
from pybussense.repository import InMemoryVehicleRepository, VehicleRepository
from pybussense.state.history import HistoryCache
from pybussense.state.store import FileHistoryStore, HistoryStore

_logger = logging.getLogger(__name__)


class BusSenseClient:
    """Fetch positions, infer each vehicle's sense and persist the results.

    Usage::

        async with BusSenseClient(config) as client:
            report = await client.run_cycle()
    """

    def __init__(
        self,
        config: BusSenseConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
        history_store: HistoryStore | None = None,
        repository: VehicleRepository | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._transport = transport
        self._external_transport = transport is not None
        store = history_store if history_store is not None else FileHistoryStore(config.cache_dir)
        self._history = HistoryCache(store, history_size=config.history_size, timeout=config.cache_timeout)
        self._resolver = DirectionResolver(config, history=self._history)
        self._repository: VehicleRepository = repository if repository is not None else InMemoryVehicleRepository()
        self._routes: dict[str, tuple[float, Route]] = {}

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> BusSenseClient:
        if self._transport is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._transport = HttpTransport(self._config, self._http_session)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        if not self._external_transport:
            self._transport = None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise BusSenseError("Client not initialized. Use 'async with BusSenseClient(...) as client:'")
        return self._transport

    @property
    def repository(self) -> VehicleRepository:
        return self._repository

    @property
    def history(self) -> HistoryCache:
        return self._history

    # ------------------------------------------------------------------
    # Upstream reads
    # ------------------------------------------------------------------

    async def fetch_current_positions(self) -> list[Vehicle]:
        """Current snapshot of every configured feed; empty when the provider fails."""
        return await fetch_current_positions(self._config, self._require_transport())

    async def fetch_route(self, line_id: str) -> Route | None:
        """Route of *line_id*, cached for ``route_cache_ttl`` seconds.

        Missing routes are not cached; the next lookup asks the provider again.
        """
        ttl = self._config.route_cache_ttl
        cached = self._routes.get(line_id)
        now = time.monotonic()
        if cached is not None and ttl > 0 and now - cached[0] < ttl:
            return cached[1]

        route = await fetch_route(self._config, self._require_transport(), line_id)
        if route is None:
            self._routes.pop(line_id, None)
        elif ttl > 0:
            self._routes[line_id] = (now, route)
        return route

    # ------------------------------------------------------------------
    # Polling
    # ------------------------------------------------------------------

    async def run_cycle(self) -> CycleReport:
        """Fetch, infer and persist one snapshot."""
        vehicles = await self.fetch_current_positions()
        if not vehicles:
            _logger.info("Provider returned no vehicles")
            return CycleReport(persisted=True)

        routes = await self._resolver.resolve_routes((v.line_id for v in vehicles), self.fetch_route)
        report = await self._resolver.process(vehicles, routes)

        try:
            await self._repository.save_snapshot(report.vehicles)
        except Exception:
            _logger.exception("Failed to persist %d vehicle records", len(report.vehicles))
        else:
            report.persisted = True

        _logger.info(
            "Cycle done: %d vehicles, %d failed, %d lines without route",
            report.processed,
            len(report.failed),
            len(report.missing_routes),
        )
        return report

    async def run_forever(self, stop_event: asyncio.Event | None = None) -> None:
        """Run a cycle every ``update_interval`` seconds until *stop_event* is set."""
        stop = stop_event if stop_event is not None else asyncio.Event()
        interval = self._config.update_interval
        while not stop.is_set():
            started = time.monotonic()
            try:
                await self.run_cycle()
            except Exception:
                _logger.exception("Polling cycle failed")
            delay = max(0.0, interval - (time.monotonic() - started))
            try:
                await asyncio.wait_for(stop.wait(), delay)
            except TimeoutError:
                continue
