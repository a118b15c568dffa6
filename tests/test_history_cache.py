from __future__ import annotations

import asyncio
import json
from pathlib import Path

import pytest

from pybussense.exceptions import CacheReadError, CacheWriteError
from pybussense.models.history import HistoryRecord
from pybussense.models.spot import RouteSpot, Spot
from pybussense.state.history import HistoryCache
from pybussense.state.store import FileHistoryStore, InMemoryHistoryStore


def _spot(lat: float, lon: float) -> Spot:
    return Spot(latitude=lat, longitude=lon)


class _BrokenStore:
    async def get(self, key: str) -> bytes | None:
        raise CacheReadError("boom", key=key)

    async def put(self, key: str, value: bytes) -> None:
        raise CacheWriteError("boom", key=key)


class _SlowStore:
    async def get(self, key: str) -> bytes | None:
        await asyncio.sleep(1)
        return None

    async def put(self, key: str, value: bytes) -> None:
        await asyncio.sleep(1)


# ------------------------------------------------------------------
# Serialization
# ------------------------------------------------------------------


def test_record_json_shape() -> None:
    record = HistoryRecord(start_point=_spot(1.5, -2.5), timeline=(_spot(1, 2), _spot(3, 4)))

    payload = json.loads(record.to_bytes())

    assert payload == {
        "startPoint": {"latitude": 1.5, "longitude": -2.5},
        "timeline": [{"latitude": 1.0, "longitude": 2.0}, {"latitude": 3.0, "longitude": 4.0}],
    }


def test_unset_start_point_serializes_as_nulls() -> None:
    payload = json.loads(HistoryRecord().to_bytes())

    assert payload == {"startPoint": {"latitude": None, "longitude": None}, "timeline": []}
    assert HistoryRecord.from_bytes(json.dumps(payload)).start_point is None


def test_round_trip_preserves_order() -> None:
    record = HistoryRecord(start_point=_spot(0, 0), timeline=(_spot(3, 3), _spot(1, 1), _spot(2, 2)))

    assert HistoryRecord.from_bytes(record.to_bytes()) == record


# ------------------------------------------------------------------
# load / save
# ------------------------------------------------------------------


@pytest.mark.asyncio
async def test_load_missing_returns_fresh_record() -> None:
    cache = HistoryCache(InMemoryHistoryStore())

    record = await cache.load("A12345")

    assert record.start_point is None
    assert record.timeline == ()


@pytest.mark.asyncio
async def test_load_unparseable_returns_fresh_record() -> None:
    store = InMemoryHistoryStore()
    await store.put("A12345", b"{not json")
    cache = HistoryCache(store)

    assert await cache.load("A12345") == HistoryRecord()


@pytest.mark.asyncio
async def test_save_then_load() -> None:
    store = InMemoryHistoryStore()
    cache = HistoryCache(store)
    record = HistoryRecord(start_point=_spot(-22.9, -43.2), timeline=(_spot(-22.91, -43.21),))

    assert await cache.save("A12345", record) is True
    assert await cache.load("A12345") == record


@pytest.mark.asyncio
async def test_store_failures_are_soft() -> None:
    cache = HistoryCache(_BrokenStore())

    assert await cache.load("A12345") == HistoryRecord()
    assert await cache.save("A12345", HistoryRecord()) is False


@pytest.mark.asyncio
async def test_store_timeouts_are_soft() -> None:
    cache = HistoryCache(_SlowStore(), timeout=0.01)

    assert await cache.load("A12345") == HistoryRecord()
    assert await cache.save("A12345", HistoryRecord()) is False


# ------------------------------------------------------------------
# Start point + timeline updates
# ------------------------------------------------------------------


def test_reconcile_adopts_candidate_when_unset() -> None:
    record = HistoryCache.reconcile_start_point(HistoryRecord(), RouteSpot(latitude=1, longitude=2, returning=True))

    assert record.start_point == _spot(1, 2)


def test_reconcile_keeps_existing_start_point() -> None:
    original = HistoryRecord(start_point=_spot(1, 2))

    record = HistoryCache.reconcile_start_point(original, _spot(9, 9))

    assert record.start_point == _spot(1, 2)


def test_reconcile_without_candidate() -> None:
    assert HistoryCache.reconcile_start_point(HistoryRecord(), None).start_point is None


def test_append_sample_adds_new_position() -> None:
    cache = HistoryCache(InMemoryHistoryStore(), history_size=3)

    record = cache.append_sample(HistoryRecord(), _spot(1, 1))

    assert record.timeline == (_spot(1, 1),)


def test_append_sample_skips_duplicate_of_last() -> None:
    cache = HistoryCache(InMemoryHistoryStore(), history_size=3)
    original = HistoryRecord(timeline=(_spot(1, 1), _spot(2, 2)))

    assert cache.append_sample(original, _spot(2, 2)) == original


def test_append_sample_allows_non_adjacent_repeat() -> None:
    cache = HistoryCache(InMemoryHistoryStore(), history_size=5)
    original = HistoryRecord(timeline=(_spot(1, 1), _spot(2, 2)))

    record = cache.append_sample(original, _spot(1, 1))

    assert record.timeline == (_spot(1, 1), _spot(2, 2), _spot(1, 1))


def test_append_sample_evicts_oldest() -> None:
    cache = HistoryCache(InMemoryHistoryStore(), history_size=3)
    record = HistoryRecord()

    for i in range(6):
        record = cache.append_sample(record, _spot(i, i))
        assert len(record.timeline) <= 3
        assert record.timeline[-1] == _spot(i, i)

    assert record.timeline == (_spot(3, 3), _spot(4, 4), _spot(5, 5))


def test_append_sample_stores_plain_spots() -> None:
    cache = HistoryCache(InMemoryHistoryStore())

    record = cache.append_sample(HistoryRecord(), RouteSpot(latitude=1, longitude=1, returning=True))

    assert type(record.timeline[0]) is Spot


def test_history_size_must_be_positive() -> None:
    with pytest.raises(ValueError):
        HistoryCache(InMemoryHistoryStore(), history_size=0)


# ------------------------------------------------------------------
# FileHistoryStore
# ------------------------------------------------------------------


@pytest.mark.asyncio
async def test_file_store_round_trip(tmp_path: Path) -> None:
    store = FileHistoryStore(tmp_path / "cache")
    cache = HistoryCache(store)
    record = HistoryRecord(start_point=_spot(0, 0), timeline=(_spot(1, 1), _spot(2, 2)))

    assert await store.get("A12345") is None
    assert await cache.save("A12345", record) is True
    assert (tmp_path / "cache" / "A12345").exists()
    assert await cache.load("A12345") == record


def test_file_store_sanitizes_keys(tmp_path: Path) -> None:
    store = FileHistoryStore(tmp_path)

    assert store.path_for("../etc/passwd").parent == tmp_path
    with pytest.raises(ValueError):
        store.path_for("..")
