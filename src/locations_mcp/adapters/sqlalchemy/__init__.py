"""SQLAlchemy persistence adapter."""

from __future__ import annotations

from .mappings import location_tables, metadata, table_for
from .repositories import SqlAlchemyLocationRepository

__all__ = [
    "SqlAlchemyLocationRepository",
    "location_tables",
    "metadata",
    "table_for",
]
