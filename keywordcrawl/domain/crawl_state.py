import time
from typing import Optional, Set

from keywordcrawl.domain.crawl_result import KeywordMatch
from keywordcrawl.domain.page import PageDates

PAGE_SEPARATOR = "\n\n--- Next Page ---\n\n"


class DomainCrawlState:
    """Mutable bookkeeping for a single domain crawl.

    One instance per DomainCrawler invocation; never shared between domains.
    """

    def __init__(self, start_url: str, start_time: Optional[float] = None):
        self.start_url = start_url
        self.current_url = start_url
        self.start_time = time.monotonic() if start_time is None else start_time
        self.visited: Set[str] = {start_url}
        self.pages_crawled = 0
        self.pagination_hops = 0
        self.matches: list[KeywordMatch] = []
        self.page_texts: list[str] = []
        self.title: Optional[str] = None
        self.title_captured = False
        self.last_dates = PageDates()
        self.has_more_pages = False

    def mark_visited(self, url: str) -> None:
        self.visited.add(url)

    def is_visited(self, url: str) -> bool:
        return url in self.visited

    def elapsed_seconds(self, now: Optional[float] = None) -> float:
        now = time.monotonic() if now is None else now
        return now - self.start_time

    def add_page_text(self, text: str) -> None:
        self.page_texts.append(text)

    @property
    def content(self) -> str:
        return PAGE_SEPARATOR.join(t for t in self.page_texts if t)
