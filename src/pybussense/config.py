"""Service configuration for pybussense."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pybussense._constants import (
    DEFAULT_HISTORY_SIZE,
    POSITION_PATHS,
    PROVIDER_HOST,
    ROUTE_PATH_TEMPLATE,
    SENSE_UNAVAILABLE,
    SENSE_UNKNOWN,
    STRATEGIES,
    STRATEGY_TEMPORAL,
)
from pybussense.exceptions import BusSenseConfigError


def _parse_mapping(value: str) -> dict[str, str]:
    """Parse ``"key:value,key:value"`` into a dict."""
    result: dict[str, str] = {}
    for item in value.split(","):
        item = item.strip()
        if not item:
            continue
        key, sep, val = item.partition(":")
        if not sep or not key.strip() or not val.strip():
            raise BusSenseConfigError(f"Invalid mapping entry {item!r} (expected 'key:value')")
        result[key.strip()] = val.strip()
    return result


@dataclasses.dataclass(frozen=True)
class BusSenseConfig:
    """Service configuration.

    Parameters
    ----------
    provider_host : str
        Host of the open-data provider serving positions and routes.
    scheme : str
        URL scheme used to reach the provider.
    position_paths : dict
        Feed name to path of the current-positions endpoint. Every feed
        is fetched on each polling cycle.
    route_path_template : str
        Path of the route CSV shapes; ``$$`` is replaced by the line id.
    update_interval : float
        Seconds between two polling cycles.
    history_size : int
        Maximum number of samples kept in a vehicle's history timeline.
    cache_dir : str
        Directory used by the on-disk history store.
    strategy : str
        Default sense inference strategy, ``"temporal"`` or ``"geometric"``.
    line_strategies : dict
        Per-line strategy overrides keyed by line id.
    max_workers : int
        Maximum number of vehicles processed concurrently.
    request_timeout : float
        Total timeout in seconds for a provider request.
    cache_timeout : float
        Timeout in seconds for a single history store read or write.
    route_cache_ttl : float
        Seconds a downloaded route stays cached. ``0`` disables caching.
    unknown_sense : str
        Label used when the direction cannot be inferred.
    unavailable_sense : str
        Label used when the line has no usable route data.
    """

    provider_host: str = PROVIDER_HOST
    scheme: str = "http"
    position_paths: dict[str, str] = dataclasses.field(default_factory=lambda: dict(POSITION_PATHS))
    route_path_template: str = ROUTE_PATH_TEMPLATE
    update_interval: float = 5.0
    history_size: int = DEFAULT_HISTORY_SIZE
    cache_dir: str = "/tmp/riobus/cache"
    strategy: str = STRATEGY_TEMPORAL
    line_strategies: dict[str, str] = dataclasses.field(default_factory=dict)
    max_workers: int = 16
    request_timeout: float = 30.0
    cache_timeout: float = 5.0
    route_cache_ttl: float = 3600.0
    unknown_sense: str = SENSE_UNKNOWN
    unavailable_sense: str = SENSE_UNAVAILABLE

    def __post_init__(self) -> None:
        if self.history_size < 1:
            raise BusSenseConfigError(f"history_size must be >= 1, got {self.history_size}")
        if self.max_workers < 1:
            raise BusSenseConfigError(f"max_workers must be >= 1, got {self.max_workers}")
        for name in (self.strategy, *self.line_strategies.values()):
            if name not in STRATEGIES:
                raise BusSenseConfigError(f"Unknown strategy {name!r} (expected one of {sorted(STRATEGIES)})")

    @property
    def base_url(self) -> str:
        return f"{self.scheme}://{self.provider_host}"

    def strategy_for(self, line_id: str) -> str:
        """Return the strategy name configured for *line_id*."""
        return self.line_strategies.get(line_id, self.strategy)

    @classmethod
    def from_env(cls, **overrides: Any) -> BusSenseConfig:
        """Create configuration from environment variables.

        Reads optional ``BUSSENSE_*`` variables. Explicit keyword
        arguments override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        BusSenseConfig
            Populated configuration.
        """
        env = os.environ

        _ENV_STR_MAP = {
            "BUSSENSE_PROVIDER_HOST": "provider_host",
            "BUSSENSE_SCHEME": "scheme",
            "BUSSENSE_ROUTE_PATH_TEMPLATE": "route_path_template",
            "BUSSENSE_CACHE_DIR": "cache_dir",
            "BUSSENSE_STRATEGY": "strategy",
            "BUSSENSE_UNKNOWN_SENSE": "unknown_sense",
            "BUSSENSE_UNAVAILABLE_SENSE": "unavailable_sense",
        }
        _ENV_NUMERIC_MAP: dict[str, tuple[str, type]] = {
            "BUSSENSE_UPDATE_INTERVAL": ("update_interval", float),
            "BUSSENSE_HISTORY_SIZE": ("history_size", int),
            "BUSSENSE_MAX_WORKERS": ("max_workers", int),
            "BUSSENSE_REQUEST_TIMEOUT": ("request_timeout", float),
            "BUSSENSE_CACHE_TIMEOUT": ("cache_timeout", float),
            "BUSSENSE_ROUTE_CACHE_TTL": ("route_cache_ttl", float),
        }

        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_STR_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        for env_key, (field_name, caster) in _ENV_NUMERIC_MAP.items():
            val = env.get(env_key)
            if val is None or field_name in overrides:
                continue
            try:
                config_kwargs[field_name] = caster(val)
            except ValueError as exc:
                raise BusSenseConfigError(f"{env_key} must be a number, got {val!r}") from exc

        # Mappings use "key:value,key:value"
        paths_env = env.get("BUSSENSE_POSITION_PATHS")
        if paths_env is not None:
            config_kwargs["position_paths"] = _parse_mapping(paths_env)

        line_env = env.get("BUSSENSE_LINE_STRATEGIES")
        if line_env is not None:
            config_kwargs["line_strategies"] = _parse_mapping(line_env)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
