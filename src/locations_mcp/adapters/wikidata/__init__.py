"""Wikidata structured facts adapter."""

from __future__ import annotations

from .client import WikidataClient, is_entity_id

__all__ = ["WikidataClient", "is_entity_id"]
