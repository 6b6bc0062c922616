"""Port for the geodata feature source."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from locations_mcp.domain.model import Partition, RawFeature


@runtime_checkable
class FeatureSource(Protocol):
    """Looks up named features inside the configured search region."""

    async def search(self, term: str, location_type: str | None = None) -> list[RawFeature]:
        """Type-scoped search, or the progressive fallback search when no type is given."""
        ...

    async def search_category(self, term: str, category: Partition) -> list[RawFeature]:
        """Search restricted to the tags of one storage partition."""
        ...
