"""Wikipedia narrative enrichment adapter."""

from __future__ import annotations

from .client import WikipediaClient, split_wikipedia_tag

__all__ = ["WikipediaClient", "split_wikipedia_tag"]
