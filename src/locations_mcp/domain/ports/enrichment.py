"""Ports for the encyclopedic enrichment sources."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from locations_mcp.domain.model import NarrativeSummary, StructuredFacts


@runtime_checkable
class SummarySource(Protocol):
    async def get_summary(self, tag: str) -> NarrativeSummary | None: ...


@runtime_checkable
class FactsSource(Protocol):
    async def get_facts(self, entity_id: str) -> StructuredFacts | None: ...
