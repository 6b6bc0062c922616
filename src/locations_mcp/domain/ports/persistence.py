"""Ports for persisting location records."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from locations_mcp.domain.model import LocationRecord, Partition


@runtime_checkable
class LocationRepository(Protocol):
    """Partition-scoped access to stored location records."""

    def add(self, partition: Partition, record: LocationRecord) -> str: ...

    def find_by_name(
        self,
        partition: Partition,
        name: str,
        *,
        location_type: str | None = None,
        limit: int | None = None,
    ) -> list[LocationRecord]: ...

    def get(self, partition: Partition, record_id: str) -> LocationRecord | None: ...

    def list_records(
        self,
        partition: Partition,
        *,
        location_type: str | None = None,
        limit: int,
    ) -> list[LocationRecord]: ...

    def probe(self, partition: Partition) -> None: ...
