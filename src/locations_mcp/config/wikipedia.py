"""Wikipedia REST API configuration values."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from .http_resilience import CacheConfig, ResilienceConfig, get_user_agent

WIKIPEDIA_SUMMARY_URL: Final[str] = "https://{lang}.wikipedia.org/api/rest_v1/page/summary/{title}"
WIKIPEDIA_TIMEOUT_SECONDS: Final[float] = 15.0


@dataclass(frozen=True, slots=True)
class WikipediaConfig:
    resilience: ResilienceConfig
    summary_url: str = WIKIPEDIA_SUMMARY_URL


def get_wikipedia_config() -> WikipediaConfig:
    resilience = ResilienceConfig(
        name="wikipedia",
        timeout_seconds=WIKIPEDIA_TIMEOUT_SECONDS,
        cache=CacheConfig(),
        default_headers={"User-Agent": get_user_agent()},
    )
    return WikipediaConfig(resilience=resilience)
