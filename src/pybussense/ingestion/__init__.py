"""Ingestion layer.

This package contains adapters that fetch data from the provider (current
positions, route shapes) and emit normalized domain objects.
"""

__all__: list[str] = []
