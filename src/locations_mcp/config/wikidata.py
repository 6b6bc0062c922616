"""Wikidata configuration values."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from .env import env_list
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy, get_user_agent

WIKIDATA_ENTITY_URL: Final[str] = "https://www.wikidata.org/wiki/Special:EntityData/{entity_id}.json"
WIKIDATA_TIMEOUT_SECONDS: Final[float] = 30.0
# three attempts, 1s then 2s apart
WIKIDATA_RETRY: Final[RetryPolicy] = RetryPolicy(total=2, backoff_factor=1.0)
DEFAULT_WIKIDATA_LANGUAGES: Final[tuple[str, ...]] = ("bg", "en")


def _has_entities(payload: object) -> bool:
    return isinstance(payload, dict) and bool(payload.get("entities"))


@dataclass(frozen=True, slots=True)
class WikidataConfig:
    resilience: ResilienceConfig
    entity_url: str = WIKIDATA_ENTITY_URL
    languages: tuple[str, ...] = DEFAULT_WIKIDATA_LANGUAGES

    @property
    def max_attempts(self) -> int:
        retry = self.resilience.retry
        return retry.attempts if retry is not None else 1


def get_wikidata_config() -> WikidataConfig:
    resilience = ResilienceConfig(
        name="wikidata",
        timeout_seconds=WIKIDATA_TIMEOUT_SECONDS,
        retry=WIKIDATA_RETRY,
        ratelimit=RateLimit(max_calls=5, per_seconds=1.0),
        cache=CacheConfig(should_cache=_has_entities),
        default_headers={
            "User-Agent": get_user_agent(),
            "Accept": "application/json",
        },
    )
    return WikidataConfig(
        resilience=resilience,
        languages=env_list("LOCATIONS_WIKIDATA_LANGUAGES", DEFAULT_WIKIDATA_LANGUAGES),
    )
