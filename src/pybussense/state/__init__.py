"""State layer.

Per-vehicle position history that survives across polling cycles, kept
behind a narrow cache interface over a pluggable key-value store.
"""

from pybussense.state.history import HistoryCache
from pybussense.state.store import FileHistoryStore, HistoryStore, InMemoryHistoryStore

__all__ = [
    "FileHistoryStore",
    "HistoryCache",
    "HistoryStore",
    "InMemoryHistoryStore",
]
