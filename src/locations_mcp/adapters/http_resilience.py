"""Throttled, retried, optionally cached httpx sessions shared by the upstream adapters."""

from __future__ import annotations

import asyncio
import json
from logging import getLogger
from typing import TYPE_CHECKING, Final

import httpx
from aiolimiter import AsyncLimiter
from hishel import AsyncSqliteStorage, FilterPolicy
from hishel import Response as HishelCacheResponse
from hishel._policies import BaseFilter
from hishel.httpx import AsyncCacheClient
from httpx_retries import Retry, RetryTransport

from locations_mcp.config.storage import get_http_cache_path
from locations_mcp.domain.errors import NetworkFailure

if TYPE_CHECKING:
    from collections.abc import Mapping
    from types import TracebackType

    from locations_mcp.config.http_resilience import (
        CacheConfig,
        CachePredicate,
        ResilienceConfig,
        RetryPolicy,
    )

log = getLogger(__name__)

_DNS_MARKERS: Final[tuple[str, ...]] = (
    "name or service not known",
    "getaddrinfo",
    "nodename",
    "name resolution",
)
_RESET_MARKERS: Final[tuple[str, ...]] = ("reset", "broken pipe", "connection aborted")


class ResilientClient:
    """One upstream session: rate limited, retried per ``config.retry``, optionally cached.

    Layers, outermost first: hishel cache, retry transport, per-attempt deadline,
    network. ``transport`` replaces the network layer (tests pass
    ``httpx.MockTransport``). Clients are short lived; use them as async context
    managers.
    """

    def __init__(
        self,
        config: ResilienceConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        ratelimit = config.ratelimit
        self._limiter = (
            AsyncLimiter(ratelimit.max_calls, ratelimit.per_seconds) if ratelimit else None
        )
        self._client = _open_session(config, transport)

    async def __aenter__(self) -> ResilientClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def get(
        self,
        url: str,
        *,
        params: Mapping[str, str] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> httpx.Response:
        request = self._client.build_request("GET", url, params=params, headers=headers)
        return await self._throttled(request)

    async def post(
        self,
        url: str,
        *,
        content: bytes | str,
        headers: Mapping[str, str] | None = None,
    ) -> httpx.Response:
        request = self._client.build_request("POST", url, content=content, headers=headers)
        return await self._throttled(request)

    async def _throttled(self, request: httpx.Request) -> httpx.Response:
        if self._limiter is None:
            return await self._client.send(request)
        async with self._limiter:
            return await self._client.send(request)


class DeadlineTransport(httpx.AsyncBaseTransport):
    """Gives each exchange, headers and body together, ``seconds`` to complete.

    httpx timeouts bound every read separately, so a server that keeps trickling
    bytes is never cut off by them. Running out of time raises
    ``httpx.TimeoutException``, which retry policies and adapters already handle.
    """

    def __init__(self, inner: httpx.AsyncBaseTransport, seconds: float) -> None:
        self._inner = inner
        self._seconds = seconds

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        try:
            async with asyncio.timeout(self._seconds):
                response = await self._inner.handle_async_request(request)
                if response.is_stream_consumed:
                    # built in memory, nothing left to wait for
                    return response
                try:
                    raw = b"".join([chunk async for chunk in response.aiter_raw()])
                finally:
                    await response.aclose()
        except TimeoutError as exc:
            raise httpx.TimeoutException(
                f"No complete response within {self._seconds:g}s", request=request
            ) from exc
        return httpx.Response(
            response.status_code,
            headers=response.headers,
            stream=httpx.ByteStream(raw),
            extensions=response.extensions,
            request=request,
        )

    async def aclose(self) -> None:
        await self._inner.aclose()


def classify_network_error(exc: httpx.TransportError) -> NetworkFailure:
    """Map a connection-level httpx error to the failure kind reported to callers."""

    if isinstance(exc, httpx.ConnectTimeout):
        return NetworkFailure.CONNECTION_TIMEOUT
    message = str(exc).lower()
    if any(marker in message for marker in _DNS_MARKERS):
        return NetworkFailure.DNS_FAILURE
    if isinstance(exc, httpx.ReadError | httpx.RemoteProtocolError):
        return NetworkFailure.CONNECTION_RESET
    if any(marker in message for marker in _RESET_MARKERS):
        return NetworkFailure.CONNECTION_RESET
    return NetworkFailure.OTHER


def _retry(policy: RetryPolicy) -> Retry:
    return Retry(
        total=policy.total,
        backoff_factor=policy.backoff_factor,
        backoff_jitter=policy.backoff_jitter,
        max_backoff_wait=policy.max_backoff_wait,
        respect_retry_after_header=policy.respect_retry_after_header,
        status_forcelist=tuple(sorted(policy.status_forcelist)),
        retry_on_exceptions=policy.retry_on_exceptions,
    )


def _open_session(
    config: ResilienceConfig,
    transport: httpx.AsyncBaseTransport | None,
) -> httpx.AsyncClient:
    chain: httpx.AsyncBaseTransport = DeadlineTransport(
        transport or httpx.AsyncHTTPTransport(), config.timeout_seconds
    )
    if config.retry is not None:
        chain = RetryTransport(transport=chain, retry=_retry(config.retry))

    headers = dict(config.default_headers or {})
    cache = config.cache
    if cache is None:
        return httpx.AsyncClient(timeout=config.timeout_seconds, headers=headers, transport=chain)

    log.debug("Opening %s session with %s response cache", config.name, cache.backend)
    policy = (
        FilterPolicy(response_filters=[_PayloadGate(cache.should_cache)])
        if cache.should_cache is not None
        else None
    )
    return AsyncCacheClient(
        timeout=config.timeout_seconds,
        headers=headers,
        transport=chain,
        storage=_cache_storage(cache),
        policy=policy,
    )


def _cache_storage(cache: CacheConfig) -> AsyncSqliteStorage:
    if cache.backend == "memory":
        database_path = ":memory:"
    elif cache.backend == "sqlite":
        database_path = str(cache.path or get_http_cache_path())
    else:
        raise ValueError(f"Unsupported cache backend: {cache.backend}")
    return AsyncSqliteStorage(database_path=database_path, default_ttl=cache.ttl_seconds)


class _PayloadGate(BaseFilter[HishelCacheResponse]):
    """Stores a response only when its body is JSON that ``accept`` approves of."""

    def __init__(self, accept: CachePredicate) -> None:
        self._accept = accept

    def needs_body(self) -> bool:
        return True

    def apply(self, item: HishelCacheResponse, body: bytes | None) -> bool:  # noqa: ARG002
        if not body:
            return False
        try:
            payload = json.loads(body)
        except ValueError:
            return False
        return bool(self._accept(payload))
