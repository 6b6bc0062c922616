"""SQLAlchemy Core tables for the location partitions."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from types import MappingProxyType
from typing import TYPE_CHECKING, Final

from sqlalchemy import (
    JSON,
    BigInteger,
    Column,
    DateTime,
    Dialect,
    Float,
    Index,
    MetaData,
    String,
    Table,
    Text,
    TypeDecorator,
)

from locations_mcp.domain.categories import PARTITION_ORDER

if TYPE_CHECKING:
    from collections.abc import Mapping

    from locations_mcp.domain.model import Partition

log = logging.getLogger(__name__)

RECORD_ID_LENGTH: Final[int] = 32


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


metadata = MetaData(
    naming_convention={
        "ix": "ix_%(table_name)s_%(column_0_N_name)s",
        "uq": "uq_%(table_name)s_%(column_0_label)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "pk": "pk_%(table_name)s",
    }
)


def _location_table(partition: Partition) -> Table:
    """Every partition shares one column layout."""

    table = Table(
        str(partition),
        metadata,
        Column("id", String(RECORD_ID_LENGTH), primary_key=True),
        Column("name", String(255), nullable=False),
        Column("type", String(64), nullable=False),
        Column("lat", Float, nullable=False),
        Column("lon", Float, nullable=False),
        Column("osm_id", BigInteger, nullable=True),
        Column("osm_type", String(16), nullable=True),
        Column("osm_tags", JSON, nullable=False, default=dict),
        Column("description", Text, nullable=True),
        Column("wikipedia_url", String(1024), nullable=True),
        Column("wikipedia_lang", String(16), nullable=True),
        Column("population", Float, nullable=True),
        Column("elevation", Float, nullable=True),
        Column("area", Float, nullable=True),
        Column("official_website", String(1024), nullable=True),
        Column("images", JSON, nullable=False, default=list),
        Column("wikipedia_tag", String(512), nullable=True),
        Column("wikidata_id", String(32), nullable=True),
        Column("last_updated", UTCDateTime(), nullable=True),
    )
    Index(None, table.c.name, table.c.type)
    return table


location_tables: Final[Mapping[Partition, Table]] = MappingProxyType(
    {partition: _location_table(partition) for partition in PARTITION_ORDER}
)


def table_for(partition: Partition) -> Table:
    return location_tables[partition]
