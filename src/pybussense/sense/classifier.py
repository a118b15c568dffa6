"""Classify position samples relative to a fixed reference point."""

from __future__ import annotations

from collections.abc import Sequence

from pybussense.models.spot import Spot
from pybussense.models.state import PositionState
from pybussense.sense.geometry import squared_distance


def classify(current: Spot | None, previous: Spot | None, reference: Spot | None) -> PositionState:
    """Compare *current* and *previous* distances to *reference*.

    Returns ``RECEDING`` when the vehicle moved away from the reference,
    ``APPROACHING`` when it moved toward it and ``STATIONARY`` when the
    distance did not change or any input is missing.
    """
    if current is None or previous is None or reference is None:
        return PositionState.STATIONARY

    previous_distance = squared_distance(reference, previous)
    current_distance = squared_distance(reference, current)
    if current_distance == previous_distance:
        return PositionState.STATIONARY
    if current_distance > previous_distance:
        return PositionState.RECEDING
    return PositionState.APPROACHING


def classify_timeline(timeline: Sequence[Spot], reference: Spot | None) -> list[PositionState]:
    """Classify every sample against its predecessor, oldest first.

    The first sample has no predecessor and is always ``STATIONARY``.
    """
    states: list[PositionState] = []
    previous: Spot | None = None
    for sample in timeline:
        states.append(classify(sample, previous, reference))
        previous = sample
    return states
