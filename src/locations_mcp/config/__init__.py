"""Application configuration helpers."""

from __future__ import annotations

from .errors import ConfigurationError
from .http_resilience import (
    CacheConfig,
    RateLimit,
    ResilienceConfig,
    RetryPolicy,
    get_user_agent,
)
from .logging import configure_logging
from .overpass import (
    BULGARIA_BBOX,
    BoundingBox,
    OverpassConfig,
    SearchRegion,
    get_overpass_config,
)
from .storage import (
    DatabaseConfig,
    StorageConfig,
    get_database_config,
    get_http_cache_path,
    get_storage_config,
)
from .wikidata import WikidataConfig, get_wikidata_config
from .wikipedia import WikipediaConfig, get_wikipedia_config

__all__ = [
    "BULGARIA_BBOX",
    "BoundingBox",
    "CacheConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "OverpassConfig",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "SearchRegion",
    "StorageConfig",
    "WikidataConfig",
    "WikipediaConfig",
    "configure_logging",
    "get_database_config",
    "get_http_cache_path",
    "get_overpass_config",
    "get_storage_config",
    "get_user_agent",
    "get_wikidata_config",
    "get_wikipedia_config",
]
