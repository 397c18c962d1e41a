import logging
import re
import time
from datetime import date, datetime
from typing import Callable, Optional

logger = logging.getLogger(__name__)

_RFC3339 = re.compile(
    r"^\d{4}-\d{2}-\d{2}[Tt ]\d{2}:\d{2}:\d{2}(\.\d+)?([Zz]|[+-]\d{2}:\d{2})$"
)


def parse_iso_date(value: str) -> date:
    """Parse a strict `YYYY-MM-DD` string.

    Raises ValueError when the string does not have that exact shape.
    """
    return datetime.strptime(value.strip(), "%Y-%m-%d").date()


def _parse_rfc3339(value: str) -> date:
    if not _RFC3339.match(value):
        raise ValueError(f"not an RFC 3339 timestamp: {value!r}")
    normalized = value
    if normalized[-1] in "Zz":
        normalized = normalized[:-1] + "+00:00"
    # fromisoformat on older interpreters only accepts 3 or 6 fraction digits
    m = re.search(r"\.(\d+)", normalized)
    if m:
        frac = (m.group(1) + "000000")[:6]
        normalized = normalized[:m.start()] + "." + frac + normalized[m.end():]
    # the calendar date in the timestamp's own offset
    return datetime.fromisoformat(normalized.replace("t", "T")).date()


def _strptime_date(fmt: str) -> Callable[[str], date]:
    def parse(value: str) -> date:
        return datetime.strptime(value, fmt).date()
    return parse


# Priority order: first parser that succeeds wins.
PAGE_DATE_PARSERS: list[Callable[[str], date]] = [
    _parse_rfc3339,
    _strptime_date("%Y-%m-%d"),
    _strptime_date("%Y/%m/%d"),
    _strptime_date("%m/%d/%Y"),
]


def parse_page_date(value: Optional[str]) -> Optional[date]:
    """Parse a date string found in page markup.

    Returns None if the value is missing or matches none of the known formats.
    """
    if value is None:
        return None
    text = value.strip()
    if not text:
        return None
    for parser in PAGE_DATE_PARSERS:
        try:
            return parser(text)
        except ValueError:
            continue
    logger.debug("Could not parse page date: %s", value)
    return None


def unix_timestamp() -> str:
    """Current unix time in whole seconds, as a string."""
    return str(int(time.time()))


def elapsed_ms(start: float, now: Optional[float] = None) -> int:
    """Milliseconds elapsed since a `time.monotonic()` reading."""
    now = time.monotonic() if now is None else now
    return int((now - start) * 1000)
