"""
Page Document Adapter for the Material Composition Extractor.
Read-only view over a product page: rendered text of text-bearing elements
and the raw text of embedded JSON-LD blocks.
"""
import re
from typing import Iterator, List

from bs4 import BeautifulSoup, Tag
from bs4.element import NavigableString, PreformattedString

from material_extractor.utils.logger import LayerLogger

LEAF_TAGS = ["li", "dd", "p", "span", "td"]
CONTAINER_TAGS = ["section", "article", "div"]

# Never rendered by a browser
HIDDEN_TAGS = ["script", "style", "noscript", "template"]

# Elements that start a new line in rendered text
BLOCK_TAGS = frozenset({
    "address", "article", "aside", "blockquote", "dd", "details", "div", "dl",
    "dt", "fieldset", "figcaption", "figure", "footer", "form", "h1", "h2",
    "h3", "h4", "h5", "h6", "header", "hr", "li", "main", "nav", "ol", "p",
    "pre", "section", "summary", "table", "tbody", "thead", "tfoot", "tr",
    "ul",
})
CELL_TAGS = frozenset({"td", "th"})

_WHITESPACE_RE = re.compile(r"\s+")
_SPACES_RE = re.compile(r"[ \t]+")


class PageDocument:
    """
    Parsed snapshot of one page.

    The HTML is parsed into a private tree per instance; the caller's markup
    is never modified.
    """

    def __init__(self, html: str):
        self.logger = LayerLogger("page_document")
        self.soup = BeautifulSoup(html or "", "lxml")

        # JSON-LD must be read before hidden elements are dropped
        self._structured_data = [
            script.string or script.get_text()
            for script in self.soup.find_all("script", type="application/ld+json")
        ]

        for tag in self.soup.find_all(HIDDEN_TAGS):
            tag.decompose()

        self.logger.log_action(
            "parse_page",
            "completed",
            html_length=len(html or ""),
            structured_data_blocks=len(self._structured_data),
        )

    @property
    def structured_data_texts(self) -> List[str]:
        """Raw serialized JSON of each embedded JSON-LD block."""
        return list(self._structured_data)

    def leaf_texts(self) -> Iterator[str]:
        """Rendered text of small, already-isolated elements, in document order."""
        for element in self.soup.find_all(LEAF_TAGS):
            yield rendered_text(element)

    def container_texts(self) -> Iterator[str]:
        """Rendered text of structural blocks, in document order."""
        for element in self.soup.find_all(CONTAINER_TAGS):
            yield rendered_text(element)


def rendered_text(element: Tag) -> str:
    """
    Approximate a browser's ``innerText``.

    Source whitespace inside text nodes collapses to single spaces; block
    elements and ``<br>`` produce line breaks.
    """
    parts: List[str] = []
    _render(element, parts)
    lines = (_SPACES_RE.sub(" ", line).strip() for line in "".join(parts).split("\n"))
    return "\n".join(line for line in lines if line)


def _render(element: Tag, parts: List[str]) -> None:
    for child in element.children:
        if isinstance(child, NavigableString):
            if not isinstance(child, PreformattedString):
                parts.append(_WHITESPACE_RE.sub(" ", str(child)))
            continue
        if not isinstance(child, Tag):
            continue
        if child.name == "br":
            parts.append("\n")
            continue
        if child.name in CELL_TAGS:
            parts.append(" ")
            _render(child, parts)
            parts.append(" ")
            continue
        is_block = child.name in BLOCK_TAGS
        if is_block:
            parts.append("\n")
        _render(child, parts)
        if is_block:
            parts.append("\n")
