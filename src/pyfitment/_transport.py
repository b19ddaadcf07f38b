"""HTTP transport for the catalog REST backend."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from pyfitment.config import NavigatorConfig
from pyfitment.exceptions import FitmentTransportError

_logger = logging.getLogger(__name__)

USER_AGENT = "pyfitment"


class Transport(Protocol):
    """Structural transport interface used by :class:`HttpCatalogProvider`.

    Having a protocol here makes it easy to pass test doubles while keeping
    the production implementation (`JsonTransport`) concrete.
    """

    async def get_json(self, endpoint: str, params: Mapping[str, Any] | None = None) -> Any: ...


def _clean_params(params: Mapping[str, Any] | None) -> dict[str, str]:
    """Drop ``None`` values and stringify the rest (aiohttp rejects ints in some versions)."""
    if not params:
        return {}
    return {key: str(value) for key, value in params.items() if value is not None}


class JsonTransport:
    """GET JSON documents from the catalog backend."""

    def __init__(self, config: NavigatorConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=config.request_timeout)

    async def get_json(self, endpoint: str, params: Mapping[str, Any] | None = None) -> Any:
        url = f"{self._config.base_url.rstrip('/')}{endpoint}"
        query = _clean_params(params)
        headers = {
            "accept": "application/json",
            "user-agent": USER_AGENT,
        }

        _logger.debug("GET %s %s", url, query)

        try:
            async with self._http.get(url, params=query, headers=headers, timeout=self._timeout) as resp:
                text = await resp.text()
                if resp.status != 200:
                    raise FitmentTransportError(
                        f"HTTP {resp.status} from {endpoint}: {text[:200]}",
                        status_code=resp.status,
                        endpoint=endpoint,
                    )
        except FitmentTransportError:
            raise
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise FitmentTransportError(
                f"Request to {endpoint} failed: {exc}",
                endpoint=endpoint,
            ) from exc

        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise FitmentTransportError(
                f"Invalid JSON from {endpoint}: {text[:200]}",
                endpoint=endpoint,
            ) from exc
