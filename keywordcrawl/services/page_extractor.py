import logging
import re
from typing import Callable, Optional, Union
from urllib.parse import urldefrag, urljoin

from bs4 import BeautifulSoup, Comment, NavigableString, Tag

from keywordcrawl.domain.page import PageDates
from keywordcrawl.exceptions import SelectorError

logger = logging.getLogger(__name__)

Document = Union[str, BeautifulSoup]

LAST_MODIFIED_PROPERTIES = {"article:modified_time", "article:updated_time"}
LAST_MODIFIED_NAMES = {"last-modified", "date-modified"}
PUBLISHED_PROPERTIES = {"article:published_time"}
PUBLISHED_NAMES = {"date", "publish-date", "publication-date"}

# Elements whose text never belongs to the readable page content.
NON_CONTENT_TAGS = ["head", "title", "script", "style", "noscript", "template", "svg", "canvas", "iframe"]

BLOCK_TAGS = [
    "address", "article", "aside", "blockquote", "dd", "div", "dl", "dt",
    "fieldset", "figcaption", "figure", "footer", "form", "h1", "h2", "h3",
    "h4", "h5", "h6", "header", "hr", "li", "main", "nav", "ol", "p", "pre",
    "section", "table", "tr", "ul",
]
CELL_TAGS = ["td", "th"]

_WHITESPACE = re.compile(r"\s+")
_EXCESS_NEWLINES = re.compile(r"\n{3,}")


def _usable_href(anchor: Tag) -> Optional[str]:
    href = anchor.get("href")
    if not href:
        return None
    href = href.strip()
    if not href or href.startswith("#") or href.lower().startswith("javascript:"):
        return None
    return href


def _first_with_href(anchors) -> Optional[str]:
    for anchor in anchors:
        href = _usable_href(anchor)
        if href is not None:
            return href
    return None


def _css_probe(selector: str) -> Callable[[BeautifulSoup], Optional[str]]:
    def probe(soup: BeautifulSoup) -> Optional[str]:
        return _first_with_href(soup.select(selector))
    probe.__name__ = f"css:{selector}"
    return probe


def _text_probe(needle: str) -> Callable[[BeautifulSoup], Optional[str]]:
    def probe(soup: BeautifulSoup) -> Optional[str]:
        anchors = (a for a in soup.find_all("a") if needle in a.get_text())
        return _first_with_href(anchors)
    probe.__name__ = f"text:{needle}"
    return probe


# Tried in order; the first probe that yields an href decides the next page.
PAGINATION_PROBES: list[Callable[[BeautifulSoup], Optional[str]]] = [
    _css_probe("a.next"),
    _css_probe("a.pagination-next"),
    _css_probe("a[rel~=next]"),
    _text_probe("Next"),
    _text_probe("next"),
    _text_probe("»"),
    _css_probe("a.pagination__next"),
    _css_probe("li.next a"),
    _css_probe("div.pagination a:last-child"),
    _css_probe('.pagination a[aria-label="Next"]'),
]


class PageExtractor:
    """Pulls dates, title, readable text and the next-page link out of HTML.

    Every public method accepts either raw HTML or an already parsed soup so
    the crawler can parse each page once.
    """

    def __init__(
        self,
        soup_factory: Optional[Callable[[str], BeautifulSoup]] = None,
        pagination_probes: Optional[list[Callable[[BeautifulSoup], Optional[str]]]] = None,
    ):
        self._soup_factory = soup_factory or (lambda html: BeautifulSoup(html, "html.parser"))
        self._pagination_probes = pagination_probes if pagination_probes is not None else PAGINATION_PROBES

    def parse(self, html: Optional[str]) -> BeautifulSoup:
        return self._soup_factory(html or "")

    def _soup(self, document: Document) -> BeautifulSoup:
        if isinstance(document, BeautifulSoup):
            return document
        return self.parse(document)

    def extract_dates(self, document: Document) -> PageDates:
        soup = self._soup(document)
        last_modified = None
        published = None

        for meta in soup.find_all("meta"):
            content = meta.get("content")
            if content is None:
                continue
            prop = meta.get("property")
            name = meta.get("name")
            if last_modified is None and (prop in LAST_MODIFIED_PROPERTIES or name in LAST_MODIFIED_NAMES):
                last_modified = content
            elif published is None and (prop in PUBLISHED_PROPERTIES or name in PUBLISHED_NAMES):
                published = content

        if published is None:
            time_elem = soup.find("time", attrs={"datetime": True})
            if time_elem is not None:
                published = time_elem.get("datetime")

        return PageDates(last_modified=last_modified, published=published)

    def extract_title(self, document: Document) -> Optional[str]:
        soup = self._soup(document)
        try:
            title_elem = soup.find("title")
        except (AttributeError, TypeError) as e:
            raise SelectorError(f"title lookup failed: {e}") from e
        if title_elem is None:
            return None
        title = title_elem.get_text(strip=True)
        return title or None

    def clean_text(self, html: Optional[str]) -> str:
        """Convert HTML (or an HTML fragment) to trimmed plain text.

        Block elements start new lines; blank lines are dropped.
        """
        if not html:
            return ""
        # Work on a private parse since the tree gets rewritten below.
        soup = self.parse(html)

        for comment in soup.find_all(string=lambda s: isinstance(s, Comment)):
            comment.extract()
        for tag in soup.find_all(NON_CONTENT_TAGS):
            # nested matches are gone once their ancestor is decomposed
            if not tag.decomposed:
                tag.decompose()

        for text_node in list(soup.find_all(string=True)):
            if type(text_node) is not NavigableString or text_node.find_parent("pre") is not None:
                continue
            text_node.replace_with(_WHITESPACE.sub(" ", str(text_node)))

        for br in soup.find_all("br"):
            br.replace_with("\n")
        for tag in soup.find_all(BLOCK_TAGS):
            tag.insert_before("\n")
            tag.insert_after("\n")
        for tag in soup.find_all(CELL_TAGS):
            tag.insert_after(" ")

        text = soup.get_text()
        lines = [line.strip() for line in text.splitlines()]
        text = "\n".join(line for line in lines if line)
        text = _EXCESS_NEWLINES.sub("\n\n", text)
        return text.strip()

    def find_next_page_url(self, document: Document, current_url: str) -> Optional[str]:
        soup = self._soup(document)
        for probe in self._pagination_probes:
            href = probe(soup)
            if href is None:
                continue
            next_url, _ = urldefrag(urljoin(current_url, href))
            logger.debug("Pagination probe %s matched %s -> %s", getattr(probe, "__name__", probe), href, next_url)
            return next_url
        return None
