"""Crawl result data model.

These are the values handed back to callers and serialized for storage; the
field names match the JSON wire format.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class KeywordMatch:
    keyword: str
    context: str
    cleaned_text: str
    count: int
    relevance_score: float
    source_url: str


@dataclass(frozen=True)
class CrawlMetadata:
    crawl_timestamp: str
    total_processing_time_ms: int
    content_summary: Optional[str] = None
    last_modified: Optional[str] = None
    published_date: Optional[str] = None


@dataclass(frozen=True)
class DomainResult:
    """Outcome of crawling one seed URL.

    A failed domain carries only `url` and `error`; everything else stays
    empty. The one exception is a crawl whose time budget ran out while a page
    was being scanned: it keeps the matches and content gathered so far, sets
    `has_more_pages`, and still reports the timeout in `error`.
    """

    url: str
    title: Optional[str] = None
    content: str = ""
    matches: list[KeywordMatch] = field(default_factory=list)
    pages_crawled: int = 0
    has_more_pages: bool = False
    metadata: Optional[CrawlMetadata] = None
    error: Optional[str] = None

    @classmethod
    def failed(cls, url: str, error: str) -> "DomainResult":
        return cls(url=url, error=error)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class CrawlResult:
    results: list[DomainResult]
    total_pages_crawled: int
    total_processing_time_ms: int
    crawl_timestamp: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
