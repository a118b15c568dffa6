from __future__ import annotations

from pybussense.models.spot import Spot
from pybussense.models.state import PositionState
from pybussense.sense.classifier import classify, classify_timeline

ORIGIN = Spot(latitude=0.0, longitude=0.0)


def _spot(lat: float, lon: float) -> Spot:
    return Spot(latitude=lat, longitude=lon)


def test_moving_away_is_receding() -> None:
    assert classify(_spot(2, 2), _spot(1, 1), ORIGIN) == PositionState.RECEDING


def test_moving_closer_is_approaching() -> None:
    assert classify(_spot(1, 1), _spot(2, 2), ORIGIN) == PositionState.APPROACHING


def test_same_distance_is_stationary() -> None:
    assert classify(_spot(0, 1), _spot(1, 0), ORIGIN) == PositionState.STATIONARY


def test_missing_inputs_are_stationary() -> None:
    assert classify(_spot(1, 1), None, ORIGIN) == PositionState.STATIONARY
    assert classify(None, _spot(1, 1), ORIGIN) == PositionState.STATIONARY
    assert classify(_spot(2, 2), _spot(1, 1), None) == PositionState.STATIONARY


def test_origin_reference_is_valid() -> None:
    # A start point at (0, 0) is a real reference, not a missing one.
    assert classify(_spot(0, 2), _spot(0, 1), ORIGIN) == PositionState.RECEDING


def test_classify_timeline_pairs_each_sample_with_predecessor() -> None:
    timeline = [_spot(1, 1), _spot(2, 2), _spot(3, 3), _spot(2, 2)]

    assert classify_timeline(timeline, ORIGIN) == [
        PositionState.STATIONARY,
        PositionState.RECEDING,
        PositionState.RECEDING,
        PositionState.APPROACHING,
    ]


def test_classify_timeline_empty() -> None:
    assert classify_timeline([], ORIGIN) == []
