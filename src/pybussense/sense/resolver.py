"""Turn a direction signal into a sense label."""

from __future__ import annotations

from pybussense._constants import SENSE_SEPARATOR, SENSE_UNKNOWN
from pybussense.exceptions import MalformedDescriptionError
from pybussense.models.state import PositionState


def swap_description(description: str) -> str:
    """Swap origin and destination of ``"<origin> X <destination>"``.

    Raises :class:`MalformedDescriptionError` unless *description* holds
    exactly one separator.
    """
    parts = description.split(SENSE_SEPARATOR)
    if len(parts) != 2:
        raise MalformedDescriptionError(description)
    origin, destination = parts
    return SENSE_SEPARATOR.join((destination, origin))


def resolve_sense(description: str, signal: PositionState, *, unknown: str = SENSE_UNKNOWN) -> str:
    """Map a direction *signal* onto the route *description*.

    ``RECEDING`` keeps the description, ``APPROACHING`` swaps it and
    ``STATIONARY`` yields the *unknown* label.
    """
    if signal == PositionState.RECEDING:
        return description
    if signal == PositionState.APPROACHING:
        return swap_description(description)
    return unknown
