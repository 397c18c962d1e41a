import logging
import re
import time
from concurrent.futures import ThreadPoolExecutor
from datetime import date
from typing import Optional
from urllib.parse import urlsplit

from keywordcrawl.domain.crawl_request import CrawlRequest
from keywordcrawl.domain.crawl_result import CrawlResult, DomainResult
from keywordcrawl.exceptions import CrawlerError, InvalidRequestError, UrlError
from keywordcrawl.services.date_filter import DateFilter
from keywordcrawl.services.domain_crawler import DomainCrawler
from keywordcrawl.utils.datetime_utils import elapsed_ms, unix_timestamp

_WHITESPACE = re.compile(r"\s")


def validate_url(candidate: str) -> str:
    """Return `candidate` unchanged if it parses as an http(s) URL with a host.

    Only unparseable entries are rejected here. A host that parses but cannot
    be resolved fails later, at fetch time, as that domain's error.
    Raises UrlError describing the first problem found.
    """
    try:
        parts = urlsplit(candidate)
        port = parts.port
    except ValueError as e:
        raise UrlError(candidate, str(e)) from e

    if parts.scheme not in ("http", "https"):
        raise UrlError(candidate, f"unsupported scheme {parts.scheme!r}")
    host = parts.hostname
    if not host:
        raise UrlError(candidate, "missing host")
    if port == 0:
        raise UrlError(candidate, "invalid port")
    if _WHITESPACE.search(host):
        raise UrlError(candidate, f"invalid host {host!r}")
    return candidate


class CrawlOrchestrator:
    """Runs a keyword crawl request across every URL it names.

    Request-level validation (date range, URL list) fails the whole request
    before any fetch. After that, each domain is crawled independently: a
    failure in one domain becomes that domain's `error` and never affects the
    others.
    """

    def __init__(
        self,
        domain_crawler: DomainCrawler,
        date_filter: Optional[DateFilter] = None,
        max_concurrency: int = 1,
        logger: Optional[logging.Logger] = None,
    ):
        self.domain_crawler = domain_crawler
        self.date_filter = date_filter or DateFilter()
        self.max_concurrency = max(int(max_concurrency), 1)
        self.logger = logger or logging.getLogger(__name__)

    def parse_urls(self, raw: str) -> list[str]:
        urls = []
        cleaned = (raw or "").strip().replace("`", "")
        for entry in cleaned.split(","):
            entry = entry.strip()
            if not entry:
                continue
            if not entry.startswith(("http://", "https://")):
                entry = f"https://{entry}"
            try:
                urls.append(validate_url(entry))
            except UrlError as e:
                self.logger.warning("Skipping URL %r: %s", entry, e)

        if not urls:
            raise InvalidRequestError("No valid URLs provided")
        return urls

    def crawl_domain(self, url: str, request: CrawlRequest, date_from: Optional[date], date_to: Optional[date]) -> DomainResult:
        """Crawl one domain, converting any failure into an error result."""
        try:
            return self.domain_crawler.crawl(url, request, date_from, date_to)
        except CrawlerError as e:
            self.logger.warning("Crawl failed for %s: %s", url, e)
            return DomainResult.failed(url, str(e))
        except Exception as e:
            self.logger.exception("Unexpected error while crawling %s", url)
            return DomainResult.failed(url, f"Other error: {e}")

    def crawl(self, request: CrawlRequest) -> CrawlResult:
        start = time.monotonic()

        date_from, date_to = self.date_filter.validate_range(request.date_from, request.date_to)
        urls = self.parse_urls(request.url)
        self.logger.info("Crawling %d domain(s) for keywords %s", len(urls), request.keywords)

        workers = min(len(urls), self.max_concurrency)
        if workers == 1:
            results = [self.crawl_domain(url, request, date_from, date_to) for url in urls]
        else:
            with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="domain-crawl") as pool:
                futures = [pool.submit(self.crawl_domain, url, request, date_from, date_to) for url in urls]
                results = [f.result() for f in futures]

        total_pages = sum(r.pages_crawled for r in results)
        return CrawlResult(
            results=results,
            total_pages_crawled=total_pages,
            total_processing_time_ms=elapsed_ms(start),
            crawl_timestamp=unix_timestamp(),
        )
