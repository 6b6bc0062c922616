"""Translate Wikipedia summaries into narrative enrichment."""

from __future__ import annotations

from typing import TYPE_CHECKING

from locations_mcp.domain.model import NarrativeSummary

if TYPE_CHECKING:
    from .schema import WikipediaSummary


def translate_summary(payload: WikipediaSummary, *, lang: str) -> NarrativeSummary:
    desktop = payload.content_urls.desktop if payload.content_urls else None
    return NarrativeSummary(
        title=payload.title,
        description=payload.extract or None,
        thumbnail=payload.thumbnail.source if payload.thumbnail else None,
        image=payload.originalimage.source if payload.originalimage else None,
        url=desktop.page if desktop else None,
        lang=lang,
    )
