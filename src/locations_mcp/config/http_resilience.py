"""Per-upstream HTTP settings: timeout, retries, throttling and response caching."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final, Literal

import httpx

from .env import env_str

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

CachePredicate = Callable[[object], bool]
"""Receives a decoded JSON body and decides whether the response may be cached."""

DEFAULT_USER_AGENT: Final[str] = "LocationsMCPServer/1.0"
DEFAULT_CACHE_TTL_SECONDS: Final[float] = 7 * 24 * 3600.0
RETRYABLE_STATUSES: Final[frozenset[int]] = frozenset({429, *range(500, 600)})


@dataclass(slots=True, frozen=True)
class RetryPolicy:
    """Retries on top of the first attempt, waiting ``backoff_factor * 2**n`` before retry n+1.

    Only idempotent methods are retried.
    """

    total: int = 2
    backoff_factor: float = 1.0
    backoff_jitter: float = 0.0
    max_backoff_wait: float = 60.0
    respect_retry_after_header: bool = True
    status_forcelist: frozenset[int] = RETRYABLE_STATUSES
    retry_on_exceptions: tuple[type[httpx.HTTPError], ...] = (
        httpx.TimeoutException,
        httpx.NetworkError,
        httpx.RemoteProtocolError,
    )

    @property
    def attempts(self) -> int:
        return self.total + 1


@dataclass(slots=True, frozen=True)
class RateLimit:
    """At most ``max_calls`` requests per ``per_seconds`` window."""

    max_calls: int
    per_seconds: float


@dataclass(slots=True, frozen=True)
class CacheConfig:
    backend: Literal["sqlite", "memory"] = "sqlite"
    path: Path | None = None
    ttl_seconds: float | None = DEFAULT_CACHE_TTL_SECONDS
    should_cache: CachePredicate | None = None


@dataclass(slots=True, frozen=True)
class ResilienceConfig:
    """``timeout_seconds`` bounds each attempt as a whole, body included."""

    name: str
    timeout_seconds: float = 30.0
    retry: RetryPolicy | None = None
    ratelimit: RateLimit | None = None
    cache: CacheConfig | None = field(default_factory=CacheConfig)
    default_headers: Mapping[str, str] | None = None


def get_user_agent() -> str:
    return env_str("LOCATIONS_USER_AGENT", DEFAULT_USER_AGENT)
