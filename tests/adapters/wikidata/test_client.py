from __future__ import annotations

import asyncio
from dataclasses import replace
from typing import TYPE_CHECKING

import httpx
import pytest
from httpx_retries import Retry

from locations_mcp.adapters.http_resilience import ResilientClient
from locations_mcp.adapters.wikidata import WikidataClient, is_entity_id
from locations_mcp.domain.errors import (
    NetworkFailure,
    UpstreamNetworkError,
    UpstreamPayloadError,
    UpstreamTimeoutError,
    UpstreamUnavailableError,
)
from tests.helpers.http import RecordingTransport, sequence_handler

if TYPE_CHECKING:
    from collections.abc import Callable

    from locations_mcp.config.wikidata import WikidataConfig

ENTITY: dict[str, object] = {
    "entities": {
        "Q472": {
            "id": "Q472",
            "labels": {"bg": {"language": "bg", "value": "София"}},
            "descriptions": {"en": {"language": "en", "value": "capital of Bulgaria"}},
            "claims": {
                "P1082": [
                    {"mainsnak": {"datavalue": {"type": "quantity", "value": {"amount": "+1236047"}}}}
                ]
            },
        }
    }
}


@pytest.fixture(autouse=True)
def backoff(monkeypatch: pytest.MonkeyPatch) -> list[float]:
    """Records the wait before each retry instead of sleeping through it."""

    delays: list[float] = []

    async def record(retry: Retry, response: object) -> None:  # noqa: ARG001
        delays.append(retry.backoff_strategy())

    monkeypatch.setattr(Retry, "asleep", record)
    return delays


def _client(
    config: WikidataConfig,
    handler: Callable[[httpx.Request], httpx.Response],
) -> tuple[WikidataClient, RecordingTransport]:
    transport = RecordingTransport(handler)
    return WikidataClient(config=config, client_factory=transport.factory()), transport


@pytest.mark.parametrize(
    ("value", "expected"),
    [("Q472", True), ("Q1", True), ("Q0", False), ("Q01", False), ("P18", False), ("q472", False)],
)
def test_is_entity_id(value: str, expected: bool) -> None:
    assert is_entity_id(value) is expected


def test_facts_are_fetched(wikidata_config: WikidataConfig, backoff: list[float]) -> None:
    client, transport = _client(wikidata_config, sequence_handler((200, ENTITY)))

    facts = asyncio.run(client.get_facts("Q472"))

    assert facts is not None
    assert facts.label == "София"
    assert facts.description == "capital of Bulgaria"
    assert facts.population == 1236047.0
    assert str(transport.requests[0].url).endswith("/Special:EntityData/Q472.json")
    assert backoff == []


def test_server_errors_are_retried_with_backoff(
    wikidata_config: WikidataConfig, backoff: list[float]
) -> None:
    client, transport = _client(
        wikidata_config, sequence_handler((503, {}), (503, {}), (200, ENTITY))
    )

    facts = asyncio.run(client.get_facts("Q472"))

    assert facts is not None
    assert len(transport.requests) == 3
    assert backoff == [1.0, 2.0]


def test_rate_limits_are_retried(wikidata_config: WikidataConfig) -> None:
    client, transport = _client(wikidata_config, sequence_handler((429, {}), (200, ENTITY)))

    assert asyncio.run(client.get_facts("Q472")) is not None
    assert len(transport.requests) == 2


def test_client_errors_are_not_retried(
    wikidata_config: WikidataConfig, backoff: list[float]
) -> None:
    client, transport = _client(wikidata_config, sequence_handler((404, {})))

    assert asyncio.run(client.get_facts("Q472")) is None
    assert len(transport.requests) == 1
    assert backoff == []


def test_invalid_entity_id_skips_request(wikidata_config: WikidataConfig) -> None:
    client, transport = _client(wikidata_config, sequence_handler((200, ENTITY)))

    assert asyncio.run(client.get_facts("not-an-id")) is None
    assert asyncio.run(client.get_facts("")) is None
    assert transport.requests == []


def test_missing_entity_is_none(wikidata_config: WikidataConfig) -> None:
    client, _ = _client(wikidata_config, sequence_handler((200, ENTITY)))

    assert asyncio.run(client.get_facts("Q999")) is None


def test_exhausted_server_errors_raise(
    wikidata_config: WikidataConfig, backoff: list[float]
) -> None:
    client, transport = _client(wikidata_config, sequence_handler((503, {})))

    with pytest.raises(UpstreamUnavailableError, match=r"503 \(after 3 attempts\)"):
        asyncio.run(client.get_facts("Q472"))

    assert len(transport.requests) == 3
    assert backoff == [1.0, 2.0]


def test_exhausted_timeouts_raise(wikidata_config: WikidataConfig) -> None:
    client, transport = _client(wikidata_config, sequence_handler(httpx.ReadTimeout("slow")))

    with pytest.raises(UpstreamTimeoutError, match="Wikidata API timeout after 3 attempts"):
        asyncio.run(client.get_facts("Q472"))

    assert len(transport.requests) == 3


def test_timeout_then_success(wikidata_config: WikidataConfig, backoff: list[float]) -> None:
    client, transport = _client(
        wikidata_config, sequence_handler(httpx.ReadTimeout("slow"), (200, ENTITY))
    )

    assert asyncio.run(client.get_facts("Q472")) is not None
    assert len(transport.requests) == 2
    assert backoff == [1.0]


def test_each_attempt_gets_its_own_deadline(
    wikidata_config: WikidataConfig, backoff: list[float]
) -> None:
    attempts: list[httpx.Request] = []

    async def stalled(request: httpx.Request) -> httpx.Response:
        attempts.append(request)
        await asyncio.sleep(10)
        return httpx.Response(200, json=ENTITY, request=request)

    config = replace(
        wikidata_config, resilience=replace(wikidata_config.resilience, timeout_seconds=0.05)
    )
    client = WikidataClient(
        config=config,
        client_factory=lambda resilience: ResilientClient(
            resilience, transport=httpx.MockTransport(stalled)
        ),
    )

    with pytest.raises(UpstreamTimeoutError, match="Wikidata API timeout after 3 attempts"):
        asyncio.run(client.get_facts("Q472"))

    assert len(attempts) == 3
    assert backoff == [1.0, 2.0]


def test_exhausted_dns_failures_are_classified(wikidata_config: WikidataConfig) -> None:
    client, _ = _client(
        wikidata_config,
        sequence_handler(httpx.ConnectError("[Errno -2] Name or service not known")),
    )

    with pytest.raises(UpstreamNetworkError) as excinfo:
        asyncio.run(client.get_facts("Q472"))

    assert excinfo.value.failure is NetworkFailure.DNS_FAILURE
    assert str(excinfo.value).endswith("(after 3 attempts)")


def test_connect_timeouts_are_network_failures(wikidata_config: WikidataConfig) -> None:
    client, _ = _client(wikidata_config, sequence_handler(httpx.ConnectTimeout("timed out")))

    with pytest.raises(UpstreamNetworkError) as excinfo:
        asyncio.run(client.get_facts("Q472"))

    assert excinfo.value.failure is NetworkFailure.CONNECTION_TIMEOUT


def test_unexpected_payload_is_not_retried(wikidata_config: WikidataConfig) -> None:
    client, transport = _client(wikidata_config, sequence_handler((200, {"entities": []})))

    with pytest.raises(UpstreamPayloadError):
        asyncio.run(client.get_facts("Q472"))

    assert len(transport.requests) == 1


def test_without_retry_policy_a_single_attempt_is_made(wikidata_config: WikidataConfig) -> None:
    config = replace(wikidata_config, resilience=replace(wikidata_config.resilience, retry=None))
    client, transport = _client(config, sequence_handler((503, {})))

    with pytest.raises(UpstreamUnavailableError) as excinfo:
        asyncio.run(client.get_facts("Q472"))

    assert str(excinfo.value) == "Wikidata API error: 503"
    assert len(transport.requests) == 1
