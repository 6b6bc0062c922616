"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING, Any

from sqlalchemy import insert, select

from locations_mcp.adapters.sqlalchemy.mappings import table_for
from locations_mcp.domain.model import CrossReferenceIds, LocationRecord

if TYPE_CHECKING:
    from sqlalchemy import Row, Select
    from sqlalchemy.orm import Session

    from locations_mcp.domain.model import Partition


class SqlAlchemyLocationRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, partition: Partition, record: LocationRecord) -> str:
        record_id = uuid.uuid4().hex
        table = table_for(partition)
        self.session.execute(insert(table).values(id=record_id, **_row_values(record)))
        return record_id

    def find_by_name(
        self,
        partition: Partition,
        name: str,
        *,
        location_type: str | None = None,
        limit: int | None = None,
    ) -> list[LocationRecord]:
        table = table_for(partition)
        stmt = select(table).where(table.c.name == name)
        if location_type:
            stmt = stmt.where(table.c.type == location_type)
        stmt = stmt.order_by(table.c.last_updated, table.c.id)
        if limit is not None:
            stmt = stmt.limit(limit)
        return self._records(stmt, partition)

    def get(self, partition: Partition, record_id: str) -> LocationRecord | None:
        table = table_for(partition)
        row = self.session.execute(select(table).where(table.c.id == record_id)).first()
        if row is None:
            return None
        return _record_from_row(row, partition)

    def list_records(
        self,
        partition: Partition,
        *,
        location_type: str | None = None,
        limit: int,
    ) -> list[LocationRecord]:
        table = table_for(partition)
        stmt = select(table)
        if location_type:
            stmt = stmt.where(table.c.type == location_type)
        stmt = stmt.order_by(table.c.name, table.c.id).limit(limit)
        return self._records(stmt, partition)

    def probe(self, partition: Partition) -> None:
        table = table_for(partition)
        self.session.execute(select(table.c.id).limit(1)).first()

    def _records(self, stmt: Select[Any], partition: Partition) -> list[LocationRecord]:
        return [_record_from_row(row, partition) for row in self.session.execute(stmt)]


def _row_values(record: LocationRecord) -> dict[str, object]:
    return {
        "name": record.name,
        "type": record.type,
        "lat": record.lat,
        "lon": record.lon,
        "osm_id": record.osm_id,
        "osm_type": record.osm_type,
        "osm_tags": dict(record.osm_tags),
        "description": record.description,
        "wikipedia_url": record.wikipedia_url,
        "wikipedia_lang": record.wikipedia_lang,
        "population": record.population,
        "elevation": record.elevation,
        "area": record.area,
        "official_website": record.official_website,
        "images": list(record.images),
        "wikipedia_tag": record.cross_references.wikipedia,
        "wikidata_id": record.cross_references.wikidata,
        "last_updated": record.last_updated,
    }


def _record_from_row(row: Row[Any], partition: Partition) -> LocationRecord:
    values = row._mapping  # noqa: SLF001
    return LocationRecord(
        id=values["id"],
        name=values["name"],
        type=values["type"],
        lat=values["lat"],
        lon=values["lon"],
        osm_id=values["osm_id"],
        osm_type=values["osm_type"],
        osm_tags=dict(values["osm_tags"] or {}),
        description=values["description"],
        wikipedia_url=values["wikipedia_url"],
        wikipedia_lang=values["wikipedia_lang"],
        population=values["population"],
        elevation=values["elevation"],
        area=values["area"],
        official_website=values["official_website"],
        images=list(values["images"] or []),
        cross_references=CrossReferenceIds(
            wikipedia=values["wikipedia_tag"],
            wikidata=values["wikidata_id"],
        ),
        last_updated=values["last_updated"],
        partition=partition,
    )
