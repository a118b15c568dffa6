"""Reduce a sequence of position states to a consensus direction."""

from __future__ import annotations

from collections.abc import Sequence

from pybussense._constants import CONSENSUS_THRESHOLD
from pybussense.models.state import PositionState


def reduce_states(
    states: Sequence[PositionState],
    *,
    most_recent_last: bool = True,
    threshold: int = CONSENSUS_THRESHOLD,
) -> PositionState:
    """Return the first state, scanning from the most recent, that repeats *threshold* times in a row.

    A single disagreeing sample resets the run. Without any run reaching
    the threshold the result is ``STATIONARY``.

    Parameters
    ----------
    states
        Per-sample states.
    most_recent_last
        ``True`` when *states* is ordered oldest first (timeline order).
    threshold
        Run length required for consensus.
    """
    ordered = reversed(states) if most_recent_last else iter(states)

    candidate: PositionState | None = None
    run = 0
    for state in ordered:
        if candidate is not None and state == candidate:
            run += 1
        else:
            candidate = state
            run = 1
        if run >= threshold:
            return candidate
    return PositionState.STATIONARY
