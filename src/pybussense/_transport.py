"""HTTP transport for the open-data provider."""

from __future__ import annotations

import json
import logging
from typing import Any, Protocol

import aiohttp

from pybussense._constants import USER_AGENT
from pybussense.config import BusSenseConfig
from pybussense.exceptions import UpstreamFetchError

_logger = logging.getLogger(__name__)

_STATUS_MESSAGES: dict[int, str] = {
    302: "provider redirected the request",
    404: "resource not found",
    503: "provider unavailable",
}


class Transport(Protocol):
    """Structural transport interface used by the ingestion modules.

    Having a protocol here makes it easy to pass test doubles while
    keeping the production implementation (`HttpTransport`) concrete.
    """

    async def get_json(self, path: str) -> Any:
        ...

    async def get_text(self, path: str) -> str:
        ...


class HttpTransport:
    """GET requests against the provider with a per-request timeout."""

    def __init__(self, config: BusSenseConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=config.request_timeout)

    async def _get(self, path: str) -> tuple[bytes, str | None]:
        """GET *path* and return the raw body with its declared charset."""
        url = f"{self._config.base_url}{path}"
        headers = {
            "accept": "*/*",
            "cache-control": "no-cache",
            "user-agent": USER_AGENT,
        }

        _logger.debug("GET %s", url)

        try:
            async with self._http.get(url, headers=headers, timeout=self._timeout, allow_redirects=False) as resp:
                body = await resp.read()
                charset = resp.charset
                if resp.status != 200:
                    reason = _STATUS_MESSAGES.get(resp.status, "request failed")
                    raise UpstreamFetchError(
                        f"HTTP {resp.status} from {path}: {reason}",
                        status_code=resp.status,
                        endpoint=path,
                    )
        except UpstreamFetchError:
            raise
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise UpstreamFetchError(f"Request to {path} failed: {exc!r}", endpoint=path) from exc

        _logger.debug("[%s] -> 200 OK (%d bytes)", url, len(body))
        return body, charset

    async def get_text(self, path: str) -> str:
        """Body of *path* as text.

        Decoded with the declared charset (UTF-8 when none is declared).
        Bodies that do not decode are read as latin-1, which the provider
        uses for some of its CSV exports.
        """
        body, charset = await self._get(path)
        try:
            return body.decode(charset or "utf-8")
        except (UnicodeDecodeError, LookupError):
            _logger.warning("Body of %s is not valid %s, reading it as latin-1", path, charset or "utf-8")
            return body.decode("latin-1")

    async def get_json(self, path: str) -> Any:
        body, charset = await self._get(path)
        try:
            text = body.decode(charset or "utf-8")
        except (UnicodeDecodeError, LookupError) as exc:
            raise UpstreamFetchError(f"Undecodable body from {path}: {exc}", endpoint=path) from exc
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise UpstreamFetchError(f"Invalid JSON from {path}: {text[:200]}", endpoint=path) from exc
