import logging
from datetime import date
from typing import Iterable, Optional

from keywordcrawl.exceptions import DateParsingError
from keywordcrawl.utils.datetime_utils import parse_iso_date, parse_page_date

logger = logging.getLogger(__name__)


class DateFilter:
    """Date bounds parsing and per-page date inclusion rules.

    Pages whose markup carries no parseable date are always included; a page
    with several dates matches if any of them falls inside the bounds.
    """

    def parse_date(self, text: str) -> date:
        try:
            return parse_iso_date(text)
        except ValueError as e:
            raise DateParsingError(f"Invalid date format '{text}': {e}") from e

    def parse_page_date(self, text: Optional[str]) -> Optional[date]:
        return parse_page_date(text)

    def validate_range(self, date_from: Optional[str], date_to: Optional[str]) -> tuple[Optional[date], Optional[date]]:
        from_date = self.parse_date(date_from) if date_from is not None else None
        to_date = self.parse_date(date_to) if date_to is not None else None
        if from_date is not None and to_date is not None and from_date > to_date:
            raise DateParsingError("date_from cannot be after date_to")
        return from_date, to_date

    def matches(self, page_dates: Iterable[Optional[str]], date_from: Optional[date] = None, date_to: Optional[date] = None) -> bool:
        if date_from is None and date_to is None:
            return True

        parsed = [d for d in (self.parse_page_date(raw) for raw in page_dates) if d is not None]
        if not parsed:
            return True

        for page_date in parsed:
            after_from = date_from is None or page_date >= date_from
            before_to = date_to is None or page_date <= date_to
            if after_from and before_to:
                return True
        logger.debug("No page date within [%s, %s]: %s", date_from, date_to, parsed)
        return False
