import logging
import re
import time
from typing import Callable, Optional

from keywordcrawl.domain.crawl_result import KeywordMatch
from keywordcrawl.exceptions import CrawlTimeoutError

logger = logging.getLogger(__name__)

CONTEXT_RADIUS = 50
CONTEXT_SEPARATOR = "\n...\n"
TRUNCATED_CONTEXT = "Time limit reached during processing"


class _ScanInterrupted(Exception):
    def __init__(self, count: int):
        self.count = count


class KeywordScorer:
    """Finds keyword occurrences in page content and ranks them.

    The relevance score is a density heuristic in [0, 100], not a probability:
    occurrences per 100 characters of context weighted by 0.7, plus 0.3 when
    the keyword shows up in the first third of the context, scaled by 10.
    """

    def __init__(
        self,
        text_cleaner: Optional[Callable[[str], str]] = None,
        clock: Callable[[], float] = time.monotonic,
        context_radius: int = CONTEXT_RADIUS,
    ):
        self.text_cleaner = text_cleaner or (lambda text: text.strip())
        self.clock = clock
        self.context_radius = context_radius

    def _expired(self, deadline: Optional[float]) -> bool:
        return deadline is not None and self.clock() > deadline

    def find_matches(self, content: str, keyword: str, deadline: Optional[float] = None) -> tuple[int, list[str]]:
        """Return the occurrence count and one context window per occurrence.

        Raises `_ScanInterrupted` when `deadline` passes mid-scan.
        """
        needle = keyword.strip()
        if not needle or not content:
            return 0, []

        spans = [m.span() for m in re.finditer(re.escape(needle), content, re.IGNORECASE)]
        count = len(spans)
        contexts = []
        for start, end in spans:
            if self._expired(deadline):
                raise _ScanInterrupted(count)
            lo = max(start - self.context_radius, 0)
            hi = min(end + self.context_radius, len(content))
            contexts.append(content[lo:hi])
        return count, contexts

    def score(self, keyword: str, context: str) -> float:
        needle = keyword.strip().lower()
        if not needle or not context:
            return 0.0
        haystack = context.lower()
        count = haystack.count(needle)
        if count == 0:
            return 0.0

        density = count * 100.0 / len(context)
        first_third = haystack[: len(context) // 3]
        position_boost = 0.3 if needle in first_third else 0.0
        return min((density * 0.7 + position_boost) * 10.0, 100.0)

    def score_page(self, content: str, keywords: list[str], source_url: str, deadline: Optional[float] = None) -> list[KeywordMatch]:
        """Build one KeywordMatch per keyword found in `content`.

        Keywords that do not occur produce no entry. If `deadline` passes,
        `CrawlTimeoutError` is raised carrying the matches built so far; when
        that happens mid-keyword, a truncated entry for that keyword is added.
        """
        matches: list[KeywordMatch] = []
        for keyword in keywords:
            if self._expired(deadline):
                raise CrawlTimeoutError(partial_matches=matches)

            try:
                count, contexts = self.find_matches(content, keyword, deadline)
            except _ScanInterrupted as interrupted:
                logger.info("Time limit reached while scanning %s for %r", source_url, keyword)
                matches.append(KeywordMatch(
                    keyword=keyword,
                    context=TRUNCATED_CONTEXT,
                    cleaned_text=self.text_cleaner(TRUNCATED_CONTEXT),
                    count=interrupted.count,
                    relevance_score=0.0,
                    source_url=source_url,
                ))
                raise CrawlTimeoutError(partial_matches=matches) from None

            if count == 0:
                continue

            context = CONTEXT_SEPARATOR.join(contexts)
            matches.append(KeywordMatch(
                keyword=keyword,
                context=context,
                cleaned_text=self.text_cleaner(context),
                count=count,
                relevance_score=self.score(keyword, context),
                source_url=source_url,
            ))
        return matches
