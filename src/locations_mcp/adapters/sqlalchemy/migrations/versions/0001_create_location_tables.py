"""Create one table per location partition.

Revision ID: 0001
Revises:
Create Date: 2025-06-01 00:00:00
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

from locations_mcp.adapters.sqlalchemy.mappings import UTCDateTime

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

PARTITIONS = ("cities", "mountains", "peaks", "natural_sites", "cultural_sites")


def _location_columns() -> list[sa.Column[object]]:
    return [
        sa.Column("id", sa.String(32), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("type", sa.String(64), nullable=False),
        sa.Column("lat", sa.Float(), nullable=False),
        sa.Column("lon", sa.Float(), nullable=False),
        sa.Column("osm_id", sa.BigInteger(), nullable=True),
        sa.Column("osm_type", sa.String(16), nullable=True),
        sa.Column("osm_tags", sa.JSON(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("wikipedia_url", sa.String(1024), nullable=True),
        sa.Column("wikipedia_lang", sa.String(16), nullable=True),
        sa.Column("population", sa.Float(), nullable=True),
        sa.Column("elevation", sa.Float(), nullable=True),
        sa.Column("area", sa.Float(), nullable=True),
        sa.Column("official_website", sa.String(1024), nullable=True),
        sa.Column("images", sa.JSON(), nullable=False),
        sa.Column("wikipedia_tag", sa.String(512), nullable=True),
        sa.Column("wikidata_id", sa.String(32), nullable=True),
        sa.Column("last_updated", UTCDateTime(), nullable=True),
    ]


def upgrade() -> None:
    for partition in PARTITIONS:
        op.create_table(
            partition,
            *_location_columns(),
            sa.PrimaryKeyConstraint("id", name=f"pk_{partition}"),
        )
        op.create_index(f"ix_{partition}_name_type", partition, ["name", "type"])


def downgrade() -> None:
    for partition in reversed(PARTITIONS):
        op.drop_index(f"ix_{partition}_name_type", table_name=partition)
        op.drop_table(partition)
