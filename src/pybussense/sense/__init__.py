"""Sense inference engine.

Geometry matching, position classification, consensus reduction and the
label resolver, composed by the strategies in :mod:`pybussense.sense.strategies`.
"""

from pybussense.sense.classifier import classify, classify_timeline
from pybussense.sense.geometry import nearest, squared_distance
from pybussense.sense.reducer import reduce_states
from pybussense.sense.resolver import resolve_sense, swap_description
from pybussense.sense.strategies import DirectionStrategy, GeometricStrategy, TemporalStrategy, build_strategy

__all__ = [
    "DirectionStrategy",
    "GeometricStrategy",
    "TemporalStrategy",
    "build_strategy",
    "classify",
    "classify_timeline",
    "nearest",
    "reduce_states",
    "resolve_sense",
    "squared_distance",
    "swap_description",
]
