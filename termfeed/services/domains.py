"""Domain-based category labels for feeds.

The filter's category facet matches against a label guessed from the feed's
host name, not against the user-defined categories.
"""

from typing import Iterable, List

from termfeed.models.schemas import Feed

# First match wins.
LABEL_KEYWORDS = [
    ("news", ("news", "nytimes", "cnn")),
    ("tech", ("tech", "wired", "ycombinator")),
    ("science", ("science", "nature", "scientific")),
    ("finance", ("finance", "money", "business")),
    ("sports", ("sport", "espn", "athletic")),
]


def extract_domain(url: str) -> str:
    """Host part of ``url`` with the scheme and ``www.`` removed."""
    clean = url.replace("https://", "").replace("http://", "").replace("www.", "")
    return clean.split("/", 1)[0]


def category_label(url: str) -> str:
    domain = extract_domain(url)
    for label, keywords in LABEL_KEYWORDS:
        if any(keyword in domain for keyword in keywords):
            return label
    return domain.split(".", 1)[0]


def available_categories(feeds: Iterable[Feed]) -> List[str]:
    """Sorted, distinct labels of the loaded feeds."""
    return sorted({category_label(feed.url) for feed in feeds})
