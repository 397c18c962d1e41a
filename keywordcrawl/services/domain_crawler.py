import logging
import time
from datetime import date
from typing import Callable, Optional

from keywordcrawl.domain.crawl_request import CrawlRequest
from keywordcrawl.domain.crawl_result import CrawlMetadata, DomainResult
from keywordcrawl.domain.crawl_state import DomainCrawlState
from keywordcrawl.domain.http_response import HttpResponse
from keywordcrawl.exceptions import CrawlTimeoutError
from keywordcrawl.services.crawl_policy import CrawlBudget
from keywordcrawl.services.date_filter import DateFilter
from keywordcrawl.services.keyword_scorer import KeywordScorer
from keywordcrawl.services.page_extractor import PageExtractor
from keywordcrawl.services.protocols import Fetcher
from keywordcrawl.utils.datetime_utils import elapsed_ms, unix_timestamp

logger = logging.getLogger(__name__)


class DomainCrawler:
    """Crawls one seed URL and, optionally, the pages its pagination links lead to.

    This class owns the per-domain control flow (budget checks, fetch, date
    filtering, keyword scoring, pagination with loop detection). It does NOT
    construct its collaborators; that stays in the DI layer.

    Transport errors propagate to the caller. A time budget running out while
    scanning keywords ends the crawl but keeps what was gathered so far.
    """

    def __init__(
        self,
        *,
        fetcher: Fetcher,
        page_extractor: PageExtractor,
        keyword_scorer: KeywordScorer,
        date_filter: DateFilter,
        http_timeout: float = 10.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.fetcher = fetcher
        self.page_extractor = page_extractor
        self.keyword_scorer = keyword_scorer
        self.date_filter = date_filter
        self.http_timeout = http_timeout
        self.clock = clock

    def make_budget(self, request: CrawlRequest) -> CrawlBudget:
        return CrawlBudget(
            max_pages=request.max_pages,
            max_time_seconds=request.max_time_seconds,
            max_depth=request.max_depth,
            http_timeout=self.http_timeout,
            clock=self.clock,
        )

    def fetch(self, url: str, timeout: Optional[float] = None) -> HttpResponse:
        response = self.fetcher.fetch(url, timeout=timeout)
        logger.info("Fetched %s -> status %s", url, response.status_code)
        try:
            sc = int(response.status_code)
            if sc < 200 or sc >= 300:
                logger.warning("Non-success status for %s: %s", url, response.status_code)
        except (TypeError, ValueError):
            logger.exception("Error parsing status code for %s: %s", url, response.status_code)
        return response

    def crawl(
        self,
        start_url: str,
        request: CrawlRequest,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> DomainResult:
        budget = self.make_budget(request)
        state = DomainCrawlState(start_url, start_time=budget.clock())
        error = None

        try:
            self._crawl_pages(state, request, budget, date_from, date_to)
        except CrawlTimeoutError as e:
            logger.warning("Crawl of %s stopped mid-page: %s", start_url, e)
            state.matches.extend(e.partial_matches)
            state.has_more_pages = True
            error = str(e)

        metadata = CrawlMetadata(
            crawl_timestamp=unix_timestamp(),
            total_processing_time_ms=elapsed_ms(state.start_time, budget.clock()),
            content_summary=state.title,
            last_modified=state.last_dates.last_modified,
            published_date=state.last_dates.published,
        )
        return DomainResult(
            url=start_url,
            title=state.title,
            content=state.content,
            matches=list(state.matches),
            pages_crawled=state.pages_crawled,
            has_more_pages=state.has_more_pages,
            metadata=metadata,
            error=error,
        )

    def _crawl_pages(
        self,
        state: DomainCrawlState,
        request: CrawlRequest,
        budget: CrawlBudget,
        date_from: Optional[date],
        date_to: Optional[date],
    ) -> None:
        while True:
            if budget.time_exceeded(state) or budget.pages_exhausted(state):
                state.has_more_pages = True
                return

            url = state.current_url
            response = self.fetch(url, timeout=budget.fetch_timeout(state))
            html = response.text or ""

            soup = self.page_extractor.parse(html)
            dates = self.page_extractor.extract_dates(soup)
            state.last_dates = dates

            if self.date_filter.matches(dates.candidates(), date_from, date_to):
                self._process_page(state, request, budget, url, html, soup)
            else:
                logger.info("Skipping %s; page dates %s outside [%s, %s]", url, tuple(dates), date_from, date_to)
            state.pages_crawled += 1

            if not request.follow_pagination:
                return

            next_url = self.page_extractor.find_next_page_url(soup, url)
            if next_url is None:
                logger.debug("No next page after %s", url)
                return
            if state.is_visited(next_url):
                logger.info("Pagination loop detected at %s -> %s", url, next_url)
                return
            if budget.depth_exhausted(state):
                state.has_more_pages = True
                return

            state.mark_visited(next_url)
            state.pagination_hops += 1
            state.current_url = next_url

    def _process_page(self, state: DomainCrawlState, request: CrawlRequest, budget: CrawlBudget, url: str, html: str, soup) -> None:
        if not state.title_captured:
            state.title = self.page_extractor.extract_title(soup)
            state.title_captured = True

        matches = self.keyword_scorer.score_page(html, request.keywords, url, deadline=budget.deadline(state))
        state.matches.extend(matches)
        state.add_page_text(self.page_extractor.clean_text(html))
