"""Protocol (interface) definitions for services."""

from typing import TYPE_CHECKING, Optional, Protocol

from keywordcrawl.domain.http_response import HttpResponse

if TYPE_CHECKING:
    from keywordcrawl.repository.crawl_results import StoredCrawlResult


class Fetcher(Protocol):
    """Fetch a URL and return a normalized HTTP-like response.

    Transport failures surface as `RequestError`.
    """

    def fetch(self, url: str, timeout: Optional[float] = None) -> HttpResponse: ...


class ResultStore(Protocol):
    """Persistence for serialized crawl results, as used by the crawl router."""

    def save(self, payload: dict) -> str:
        """Store `payload` and return its id."""
        ...

    def get(self, result_id: str) -> Optional["StoredCrawlResult"]: ...

    def list_recent(self, limit: int = 20) -> list["StoredCrawlResult"]: ...
