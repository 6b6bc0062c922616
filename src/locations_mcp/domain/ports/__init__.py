"""Domain port definitions for adapters."""

from __future__ import annotations

from .enrichment import FactsSource, SummarySource
from .geodata import FeatureSource
from .persistence import LocationRepository
from .unit_of_work import (
    LocationRepositories,
    LocationUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "FactsSource",
    "FeatureSource",
    "LocationRepositories",
    "LocationRepository",
    "LocationUnitOfWork",
    "RepositoryCollection",
    "SummarySource",
    "UnitOfWork",
]
