"""Wikipedia REST API client."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Final
from urllib.parse import quote

import httpx
import pydantic

from locations_mcp.adapters.http_resilience import ResilientClient, classify_network_error
from locations_mcp.domain.errors import (
    UpstreamNetworkError,
    UpstreamPayloadError,
    UpstreamTimeoutError,
    network_failure_message,
)

from .schema import WikipediaSummary
from .translator import translate_summary

if TYPE_CHECKING:
    from collections.abc import Callable

    from locations_mcp.config.http_resilience import ResilienceConfig
    from locations_mcp.config.wikipedia import WikipediaConfig
    from locations_mcp.domain.model import NarrativeSummary

log = getLogger(__name__)

SOURCE: Final[str] = "Wikipedia"


def split_wikipedia_tag(tag: str) -> tuple[str, str] | None:
    """Split an OSM ``wikipedia`` tag (``lang:title``) into its parts."""

    if ":" not in tag:
        return None
    lang, title = tag.split(":", 1)
    lang, title = lang.strip(), title.strip()
    if not lang or not title:
        return None
    return lang, title


class WikipediaClient:
    """Fetches page summaries; absent pages yield ``None`` rather than an error."""

    def __init__(
        self,
        *,
        config: WikipediaConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._client_factory = client_factory or ResilientClient

    async def get_summary(self, tag: str) -> NarrativeSummary | None:
        parts = split_wikipedia_tag(tag) if tag else None
        if parts is None:
            return None
        lang, title = parts
        url = self._config.summary_url.format(lang=lang, title=quote(title, safe=""))

        log.info("Fetching Wikipedia summary for %r", tag)
        async with self._client_factory(self._config.resilience) as client:
            try:
                response = await client.get(url)
            except httpx.TimeoutException as exc:
                log.error(
                    "Wikipedia query timed out after %ss for %s",
                    self._config.resilience.timeout_seconds,
                    tag,
                )
                raise UpstreamTimeoutError("Wikipedia API timeout", source=SOURCE) from exc
            except httpx.TransportError as exc:
                failure = classify_network_error(exc)
                raise UpstreamNetworkError(
                    network_failure_message(SOURCE, failure), source=SOURCE, failure=failure
                ) from exc

        if not response.is_success:
            log.warning("Wikipedia API error for %s: %s", tag, response.status_code)
            return None

        try:
            payload = WikipediaSummary.model_validate_json(response.content)
        except pydantic.ValidationError as exc:
            raise UpstreamPayloadError(
                f"Unexpected Wikipedia response for {tag}", source=SOURCE
            ) from exc
        return translate_summary(payload, lang=lang)
