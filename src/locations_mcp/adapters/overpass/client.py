"""Overpass API client."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Final

import httpx
import pydantic

from locations_mcp.adapters.http_resilience import ResilientClient, classify_network_error
from locations_mcp.domain.errors import (
    UpstreamNetworkError,
    UpstreamPayloadError,
    UpstreamStatusError,
    UpstreamTimeoutError,
    UpstreamUnavailableError,
    network_failure_message,
)

from .schema import OverpassResponse

if TYPE_CHECKING:
    from collections.abc import Callable

    from locations_mcp.config.http_resilience import ResilienceConfig
    from locations_mcp.config.overpass import OverpassConfig

log = getLogger(__name__)

SOURCE: Final[str] = "Overpass"
_UNAVAILABLE_STATUSES: Final[frozenset[int]] = frozenset({429, 504})


class OverpassClient:
    """Low-level HTTP client for the Overpass interpreter endpoint."""

    def __init__(
        self,
        *,
        config: OverpassConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._client_factory = client_factory or ResilientClient

    @property
    def config(self) -> OverpassConfig:
        return self._config

    def open(self) -> ResilientClient:
        """HTTP session shared by every query of one search."""

        return self._client_factory(self._config.resilience)

    async def execute(self, client: ResilientClient, query: str) -> OverpassResponse:
        log.debug("Overpass query:\n%s", query)
        try:
            response = await client.post(
                self._config.url,
                content=query.encode("utf-8"),
                headers={"Content-Type": "text/plain; charset=utf-8"},
            )
        except httpx.TimeoutException as exc:
            log.error(
                "Overpass query timed out after %ss", self._config.resilience.timeout_seconds
            )
            raise UpstreamTimeoutError("Overpass API timeout", source=SOURCE) from exc
        except httpx.TransportError as exc:
            failure = classify_network_error(exc)
            raise UpstreamNetworkError(
                network_failure_message(SOURCE, failure), source=SOURCE, failure=failure
            ) from exc

        status = response.status_code
        if status in _UNAVAILABLE_STATUSES:
            log.error("Overpass API %s, server overloaded or rate limited", status)
            raise UpstreamUnavailableError(
                f"Overpass API temporarily unavailable ({status})",
                source=SOURCE,
                status_code=status,
            )
        if not response.is_success:
            raise UpstreamStatusError(
                f"Overpass API error: {status}", source=SOURCE, status_code=status
            )

        try:
            payload = OverpassResponse.model_validate_json(response.content)
        except pydantic.ValidationError as exc:
            raise UpstreamPayloadError("Unexpected Overpass response payload", source=SOURCE) from exc

        log.info("Overpass returned %d elements", len(payload.elements))
        return payload
