"""Overpass geodata adapter."""

from __future__ import annotations

from .client import OverpassClient
from .fetcher import OverpassFeatureSource
from .query import build_query, escape_search_term
from .translator import determine_type

__all__ = [
    "OverpassClient",
    "OverpassFeatureSource",
    "build_query",
    "determine_type",
    "escape_search_term",
]
