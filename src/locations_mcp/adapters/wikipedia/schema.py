"""Wikipedia REST summary schemas."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class WikipediaBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class WikipediaImage(WikipediaBaseModel):
    source: str | None = None


class WikipediaPageUrls(WikipediaBaseModel):
    page: str | None = None


class WikipediaContentUrls(WikipediaBaseModel):
    desktop: WikipediaPageUrls | None = None


class WikipediaSummary(WikipediaBaseModel):
    title: str | None = None
    extract: str | None = None
    thumbnail: WikipediaImage | None = None
    originalimage: WikipediaImage | None = None
    content_urls: WikipediaContentUrls | None = None
