from typing import NamedTuple, Optional


class PageDates(NamedTuple):
    """Dates advertised by a page's markup, as raw strings."""
    last_modified: Optional[str] = None
    published: Optional[str] = None

    def candidates(self) -> list[Optional[str]]:
        return [self.last_modified, self.published]
