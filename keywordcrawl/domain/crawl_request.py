from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

DEFAULT_MAX_PAGES = 10


@dataclass(frozen=True)
class CrawlRequest:
    """A keyword crawl over one or more seed URLs.

    `url` is the raw, possibly comma-separated field as submitted; splitting
    and validation happen in the orchestrator.
    """

    url: str
    keywords: list[str] = field(default_factory=list)
    max_depth: Optional[int] = None
    max_time_seconds: Optional[float] = None
    follow_pagination: bool = False
    max_pages: int = DEFAULT_MAX_PAGES
    date_from: Optional[str] = None
    date_to: Optional[str] = None
