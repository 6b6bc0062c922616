"""Overpass API configuration values."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Final

from .env import env_choice, env_str
from .http_resilience import RateLimit, ResilienceConfig, get_user_agent

DEFAULT_OVERPASS_URL: Final[str] = "https://overpass-api.de/api/interpreter"
DEFAULT_AREA_NAME: Final[str] = "България"
OVERPASS_QUERY_TIMEOUT_SECONDS: Final[int] = 25
OVERPASS_FETCH_TIMEOUT_SECONDS: Final[float] = 30.0


@dataclass(frozen=True, slots=True)
class BoundingBox:
    min_lat: float
    min_lon: float
    max_lat: float
    max_lon: float


BULGARIA_BBOX: Final[BoundingBox] = BoundingBox(
    min_lat=41.2, min_lon=22.3, max_lat=44.2, max_lon=28.6
)


@dataclass(frozen=True, slots=True)
class SearchRegion:
    """Geographic scope every query is restricted to.

    Either an administrative area looked up by name (``area_name`` and
    ``admin_level``) or a fixed bounding box. The bounding box wins when both
    are given.
    """

    area_name: str | None = DEFAULT_AREA_NAME
    admin_level: int = 2
    bbox: BoundingBox | None = None


@dataclass(frozen=True, slots=True)
class OverpassConfig:
    resilience: ResilienceConfig
    url: str = DEFAULT_OVERPASS_URL
    query_timeout_seconds: int = OVERPASS_QUERY_TIMEOUT_SECONDS
    region: SearchRegion = field(default_factory=SearchRegion)


def get_overpass_config() -> OverpassConfig:
    region_mode = env_choice("LOCATIONS_REGION", "area", frozenset({"area", "bbox"}))
    if region_mode == "bbox":
        region = SearchRegion(area_name=None, bbox=BULGARIA_BBOX)
    else:
        region = SearchRegion(area_name=env_str("LOCATIONS_AREA_NAME", DEFAULT_AREA_NAME))

    resilience = ResilienceConfig(
        name="overpass",
        timeout_seconds=OVERPASS_FETCH_TIMEOUT_SECONDS,
        # one client per search, so this only spaces the fallback stages of that search
        ratelimit=RateLimit(max_calls=1, per_seconds=1.0),
        cache=None,
        default_headers={"User-Agent": get_user_agent()},
    )
    return OverpassConfig(
        resilience=resilience,
        url=env_str("OVERPASS_URL", DEFAULT_OVERPASS_URL),
        region=region,
    )
