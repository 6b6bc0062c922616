"""Wikidata entity data client."""

from __future__ import annotations

import re
from logging import getLogger
from typing import TYPE_CHECKING, Final

import httpx
import pydantic

from locations_mcp.adapters.http_resilience import ResilientClient, classify_network_error
from locations_mcp.config.http_resilience import RETRYABLE_STATUSES
from locations_mcp.domain.errors import (
    NetworkFailure,
    UpstreamError,
    UpstreamNetworkError,
    UpstreamPayloadError,
    UpstreamTimeoutError,
    UpstreamUnavailableError,
    network_failure_message,
)

from .schema import WikidataEntityData
from .translator import translate_entity

if TYPE_CHECKING:
    from collections.abc import Callable

    from locations_mcp.config.http_resilience import ResilienceConfig, RetryPolicy
    from locations_mcp.config.wikidata import WikidataConfig
    from locations_mcp.domain.model import StructuredFacts

log = getLogger(__name__)

SOURCE: Final[str] = "Wikidata"
ENTITY_ID_PATTERN: Final[re.Pattern[str]] = re.compile(r"^Q[1-9]\d*$")


def is_entity_id(value: str) -> bool:
    return bool(ENTITY_ID_PATTERN.match(value))


class WikidataClient:
    """Fetches entity data through a session that retries per the configured policy.

    The retry transport has already spent every attempt by the time a retryable
    status or error reaches this class, so those are reported as exhausted.
    """

    def __init__(
        self,
        *,
        config: WikidataConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._client_factory = client_factory or ResilientClient

    @property
    def _retry(self) -> RetryPolicy | None:
        return self._config.resilience.retry

    async def get_facts(self, entity_id: str) -> StructuredFacts | None:
        if not entity_id or not is_entity_id(entity_id):
            return None

        url = self._config.entity_url.format(entity_id=entity_id)
        log.info(
            "Fetching Wikidata entity %s (up to %d attempts)", entity_id, self._config.max_attempts
        )
        async with self._client_factory(self._config.resilience) as client:
            try:
                response = await client.get(url)
            except httpx.TransportError as exc:
                raise self._transport_error(exc) from exc

        status = response.status_code
        retryable = self._retry.status_forcelist if self._retry else RETRYABLE_STATUSES
        if status in retryable:
            raise UpstreamUnavailableError(
                f"Wikidata API error: {status}{self._after_attempts()}",
                source=SOURCE,
                status_code=status,
            )
        if not response.is_success:
            log.warning("Wikidata API error for %s: %s", entity_id, status)
            return None

        try:
            payload = WikidataEntityData.model_validate_json(response.content)
        except pydantic.ValidationError as exc:
            raise UpstreamPayloadError(
                f"Unexpected Wikidata response for {entity_id}", source=SOURCE
            ) from exc

        entity = payload.entities.get(entity_id)
        if entity is None:
            log.info("Wikidata has no entity %s", entity_id)
            return None
        log.info("Fetched Wikidata entity %s", entity_id)
        return translate_entity(entity, languages=self._config.languages)

    def _after_attempts(self) -> str:
        attempts = self._config.max_attempts
        return f" (after {attempts} attempts)" if attempts > 1 else ""

    def _transport_error(self, exc: httpx.TransportError) -> UpstreamError:
        retried = self._retry is not None and isinstance(exc, self._retry.retry_on_exceptions)
        if isinstance(exc, httpx.TimeoutException) and not isinstance(exc, httpx.ConnectTimeout):
            if retried:
                return UpstreamTimeoutError(
                    f"Wikidata API timeout after {self._config.max_attempts} attempts",
                    source=SOURCE,
                )
            return UpstreamTimeoutError("Wikidata API timeout", source=SOURCE)

        failure = classify_network_error(exc)
        if failure is NetworkFailure.OTHER and not retried:
            return UpstreamNetworkError(
                f"{SOURCE} request failed: {exc}", source=SOURCE, failure=failure
            )
        message = network_failure_message(SOURCE, failure)
        if retried:
            message += self._after_attempts()
        log.error("%s", message)
        return UpstreamNetworkError(message, source=SOURCE, failure=failure)
