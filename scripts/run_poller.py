#!/usr/bin/env python3
"""Poll the provider and infer the sense of every bus.

Usage
-----
Optionally set ``BUSSENSE_*`` environment variables and run::

    python scripts/run_poller.py

Options::

    --once                 Run a single cycle and print the vehicles
    --strategy NAME        "temporal" (default) or "geometric"
    --history-size N       Samples kept per vehicle (temporal strategy)
    --cache-dir DIR        Directory of the on-disk history store
    --interval SECONDS     Seconds between cycles
    --verbose, -v          Enable debug logging
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import signal
import sys
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pybussense import BusSenseClient, BusSenseConfig, BusSenseError  # noqa: E402


def _overrides(args: argparse.Namespace) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    if args.strategy:
        overrides["strategy"] = args.strategy
    if args.history_size is not None:
        overrides["history_size"] = args.history_size
    if args.cache_dir:
        overrides["cache_dir"] = args.cache_dir
    if args.interval is not None:
        overrides["update_interval"] = args.interval
    return overrides


async def main() -> int:
    parser = argparse.ArgumentParser(description="Infer the travel direction of every bus in the fleet.")
    parser.add_argument("--once", action="store_true", help="Run a single cycle and print the vehicles")
    parser.add_argument("--strategy", choices=("temporal", "geometric"), help="Sense inference strategy")
    parser.add_argument("--history-size", type=int, help="Samples kept per vehicle")
    parser.add_argument("--cache-dir", help="Directory of the on-disk history store")
    parser.add_argument("--interval", type=float, help="Seconds between cycles")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    try:
        config = BusSenseConfig.from_env(**_overrides(args))
    except BusSenseError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 2

    async with BusSenseClient(config) as client:
        if args.once:
            report = await client.run_cycle()
            rows = [vehicle.model_dump() for vehicle in report.vehicles]
            print(json.dumps(rows, indent=2, ensure_ascii=False))
            return 0 if not report.failed else 1

        stop = asyncio.Event()
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, stop.set)
            except NotImplementedError:  # pragma: no cover - Windows
                pass
        await client.run_forever(stop)
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
