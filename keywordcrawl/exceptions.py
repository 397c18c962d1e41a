"""Custom exceptions for KeywordCrawl services.

Every error the crawl engine raises derives from `CrawlerError`; its string
form is what ends up in a domain result's `error` field or in the API's
400 response body.
"""
from typing import Optional


class CrawlerError(Exception):
    """Base class for crawl failures."""


class RequestError(CrawlerError):
    """Raised when an HTTP fetch fails due to network/transport errors."""

    def __init__(self, url: str, original: Exception):
        self.url = url
        self.original = original
        super().__init__(f"Request error: {url}: {original}")


class UrlError(CrawlerError):
    """Raised when a URL cannot be parsed or is not crawlable."""

    def __init__(self, url: str, reason: str = "unparseable"):
        self.url = url
        self.reason = reason
        super().__init__(f"Invalid URL: {url} ({reason})")


class SelectorError(CrawlerError):
    """Raised when a document cannot be queried for an element."""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"Selector error: {detail}")


class CrawlTimeoutError(CrawlerError):
    """Raised when the time budget runs out while scanning a page.

    `partial_matches` holds the keyword matches gathered on the page before
    the budget ran out, including the truncation marker for the keyword that
    was being scanned.
    """

    def __init__(self, partial_matches: Optional[list] = None):
        self.partial_matches = list(partial_matches or [])
        super().__init__("Timeout error: Crawling exceeded the time limit")


class DateParsingError(CrawlerError):
    """Raised for an unparseable date bound or an inverted date range."""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"Date parsing error: {detail}")


class InvalidRequestError(CrawlerError):
    """Raised for request-level problems such as an empty URL list."""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"Other error: {detail}")
