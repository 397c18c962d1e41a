"""Domain objects for KeywordCrawl - explicit re-exports to satisfy linters."""
from .crawl_request import CrawlRequest as CrawlRequest
from .crawl_result import KeywordMatch as KeywordMatch
from .crawl_result import CrawlMetadata as CrawlMetadata
from .crawl_result import DomainResult as DomainResult
from .crawl_result import CrawlResult as CrawlResult
from .crawl_state import DomainCrawlState as DomainCrawlState
from .http_response import HttpResponse as HttpResponse
from .page import PageDates as PageDates

__all__ = [
    "CrawlRequest",
    "KeywordMatch",
    "CrawlMetadata",
    "DomainResult",
    "CrawlResult",
    "DomainCrawlState",
    "HttpResponse",
    "PageDates",
]
