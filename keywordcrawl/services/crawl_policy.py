import logging
import time
from typing import Callable, Optional

from keywordcrawl.domain.crawl_state import DomainCrawlState

logger = logging.getLogger(__name__)

MIN_FETCH_TIMEOUT = 0.5


class CrawlBudget:
    """Encapsulates crawl budget rules: wall-clock time, page count and pagination depth.

    Separates budget decisions from crawl orchestration logic. A budget is
    built per domain crawl from the request's limits.
    """

    def __init__(
        self,
        max_pages: int,
        max_time_seconds: Optional[float] = None,
        max_depth: Optional[int] = None,
        http_timeout: float = 10.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_pages = max_pages
        self.max_time_seconds = max_time_seconds
        self.max_depth = max_depth
        self.http_timeout = http_timeout
        self.clock = clock

    def deadline(self, state: DomainCrawlState) -> Optional[float]:
        """Clock reading after which the crawl is over time, or None if unbounded."""
        if self.max_time_seconds is None:
            return None
        return state.start_time + self.max_time_seconds

    def time_exceeded(self, state: DomainCrawlState) -> bool:
        if self.max_time_seconds is None:
            return False
        if state.elapsed_seconds(self.clock()) > self.max_time_seconds:
            logger.info("Time budget of %ss exhausted for %s", self.max_time_seconds, state.start_url)
            return True
        return False

    def pages_exhausted(self, state: DomainCrawlState) -> bool:
        if state.pages_crawled >= self.max_pages:
            logger.info("Page budget of %s reached for %s", self.max_pages, state.start_url)
            return True
        return False

    def depth_exhausted(self, state: DomainCrawlState) -> bool:
        """True once `max_depth` pagination links have been followed."""
        if self.max_depth is None:
            return False
        if state.pagination_hops >= self.max_depth:
            logger.info("Pagination depth of %s reached for %s", self.max_depth, state.start_url)
            return True
        return False

    def fetch_timeout(self, state: DomainCrawlState) -> float:
        """HTTP timeout for the next fetch, shortened to the remaining time budget."""
        if self.max_time_seconds is None:
            return self.http_timeout
        remaining = self.max_time_seconds - state.elapsed_seconds(self.clock())
        return max(min(self.http_timeout, remaining), MIN_FETCH_TIMEOUT)
