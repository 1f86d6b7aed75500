"""HTML to plain text rendering for item descriptions."""

import re
import textwrap
import warnings

from bs4 import BeautifulSoup, MarkupResemblesLocatorWarning

DEFAULT_WRAP_WIDTH = 80

BLOCK_TAGS = ["p", "div", "br", "li", "blockquote", "pre", "h1", "h2", "h3", "h4", "h5", "h6"]

_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")


def html_to_text(html: str, width: int = DEFAULT_WRAP_WIDTH) -> str:
    """Strip markup from ``html`` and wrap the text at ``width`` columns.

    Block elements become paragraph breaks (blank lines); whitespace inside a
    paragraph collapses to single spaces.
    """
    if not html:
        return ""

    with warnings.catch_warnings():
        warnings.simplefilter("ignore", MarkupResemblesLocatorWarning)
        soup = BeautifulSoup(html, "lxml")

    for tag in soup(["script", "style"]):
        tag.decompose()
    for tag in soup.find_all(BLOCK_TAGS):
        tag.insert_after("\n\n")

    paragraphs = []
    for block in _PARAGRAPH_BREAK.split(soup.get_text()):
        words = block.split()
        if words:
            paragraphs.append(textwrap.fill(" ".join(words), width=width))

    return "\n\n".join(paragraphs)


def plain_text_length(html: str, width: int = DEFAULT_WRAP_WIDTH) -> int:
    """Character length of the rendered plain text of ``html``."""
    return len(html_to_text(html, width))
