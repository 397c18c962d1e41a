from typing import Callable, Optional

import requests

from keywordcrawl.domain.http_response import HttpResponse
from keywordcrawl.exceptions import RequestError


class HttpService:
    """
    HTTP client wrapper for fetching web pages.

    Requires http_client callable for dependency injection, so tests can pass a
    stub instead of patching requests.
    """

    def __init__(self, user_agent: str, http_client: Callable, timeout: float = 10):
        self.user_agent = user_agent
        self.timeout = timeout
        self.http_client = http_client

    def fetch(self, url: str, timeout: Optional[float] = None) -> HttpResponse:
        """Fetch URL and return response with status code, body text, and Content-Type."""
        headers = {"User-Agent": self.user_agent}
        try:
            resp = self.http_client(url, headers=headers, timeout=timeout if timeout is not None else self.timeout)
            text = resp.text
        except requests.exceptions.RequestException as e:
            raise RequestError(url, e) from e

        # Extract Content-Type if response has headers; let real exceptions bubble up.
        ct = None
        if hasattr(resp, 'headers'):
            ct = resp.headers.get('Content-Type')

        return HttpResponse(resp.status_code, text, ct)
