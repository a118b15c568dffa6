"""Per-vehicle bounded position history.

:class:`HistoryCache` is the only component allowed to read or write
history records. Every store failure is soft: a failed read yields an
empty record and a failed write is logged and reported to the caller.
"""

from __future__ import annotations

import asyncio
import logging

from pydantic import ValidationError

from pybussense._constants import DEFAULT_HISTORY_SIZE
from pybussense.models.history import HistoryRecord
from pybussense.models.spot import Spot
from pybussense.state.store import HistoryStore

_logger = logging.getLogger(__name__)


class HistoryCache:
    """Load, update and save :class:`HistoryRecord` objects keyed by vehicle id."""

    def __init__(
        self,
        store: HistoryStore,
        *,
        history_size: int = DEFAULT_HISTORY_SIZE,
        timeout: float | None = 5.0,
    ) -> None:
        if history_size < 1:
            raise ValueError(f"history_size must be >= 1, got {history_size}")
        self._store = store
        self._history_size = history_size
        self._timeout = timeout

    @property
    def history_size(self) -> int:
        return self._history_size

    async def load(self, vehicle_id: str) -> HistoryRecord:
        """Return the stored record, or a fresh one if it is missing or unreadable."""
        try:
            raw = await asyncio.wait_for(self._store.get(vehicle_id), self._timeout)
        except Exception:
            _logger.warning("History read failed for vehicle %s; starting fresh", vehicle_id, exc_info=True)
            return HistoryRecord()

        if not raw:
            return HistoryRecord()

        try:
            return HistoryRecord.from_bytes(raw)
        except ValidationError:
            _logger.warning("Discarding unparseable history for vehicle %s", vehicle_id, exc_info=True)
            return HistoryRecord()

    async def save(self, vehicle_id: str, record: HistoryRecord) -> bool:
        """Persist *record*, overwriting any previous value.

        Returns ``False`` when the write failed. Failures never propagate.
        """
        try:
            await asyncio.wait_for(self._store.put(vehicle_id, record.to_bytes()), self._timeout)
        except Exception:
            _logger.error("History write failed for vehicle %s", vehicle_id, exc_info=True)
            return False
        return True

    @staticmethod
    def reconcile_start_point(record: HistoryRecord, candidate: Spot | None) -> HistoryRecord:
        """Adopt *candidate* as start point only if the record has none yet."""
        if record.start_point is not None or candidate is None:
            return record
        return record.model_copy(update={"start_point": candidate.as_spot()})

    def append_sample(self, record: HistoryRecord, sample: Spot) -> HistoryRecord:
        """Append *sample* unless it repeats the last entry, then trim to ``history_size``."""
        timeline = record.timeline
        sample = sample.as_spot()
        if not timeline or timeline[-1] != sample:
            timeline = (*timeline, sample)
        if len(timeline) > self._history_size:
            timeline = timeline[-self._history_size :]
        if timeline == record.timeline:
            return record
        return record.model_copy(update={"timeline": timeline})
