"""OPML import.

Reads feed subscriptions exported by another reader.
"""

import logging
from pathlib import Path
from typing import List, Union

from bs4 import BeautifulSoup

from termfeed.errors import TermfeedError

logger = logging.getLogger(__name__)


def parse_opml(content: Union[str, bytes]) -> List[str]:
    """Extract feed URLs from an OPML document.

    Every ``<outline>`` carrying an ``xmlUrl`` attribute contributes its URL,
    at any nesting depth, in document order and without duplicates.

    Raises:
        TermfeedError: If the document has no ``<opml>`` root
    """
    soup = BeautifulSoup(content, "xml")
    if soup.find("opml") is None:
        raise TermfeedError("Not an OPML document")

    urls: List[str] = []
    seen = set()
    for outline in soup.find_all("outline"):
        url = (outline.get("xmlUrl") or "").strip()
        if url and url not in seen:
            seen.add(url)
            urls.append(url)

    return urls


def import_opml(path: Union[str, Path]) -> List[str]:
    """Read the OPML file at ``path`` and return its feed URLs.

    Raises:
        TermfeedError: If the file cannot be read or is not OPML
    """
    path = Path(path)
    logger.info(f"Importing OPML from {path}")

    try:
        content = path.read_bytes()
    except OSError as e:
        raise TermfeedError(f"Cannot read OPML file {path}: {e}") from e

    urls = parse_opml(content)
    logger.info(f"Found {len(urls)} feeds in {path}")
    return urls
