"""Filter engine.

Each facet of FilterOptions is an independent predicate over a single
(feed, item) pair. Facets are combined with AND and evaluation stops at the
first failing one.
"""

from datetime import datetime, timedelta, timezone
from typing import Container, List, Optional, Sequence

from termfeed.models.schemas import Feed, FeedItem, FilterOptions, ItemRef, TimeFilter
from termfeed.services.dashboard import resolve
from termfeed.services.dates import parse_pub_date
from termfeed.services.domains import category_label
from termfeed.services.identity import item_key
from termfeed.services.text import DEFAULT_WRAP_WIDTH, plain_text_length

DAY = timedelta(days=1)
WEEK = timedelta(days=7)
MONTH = timedelta(days=30)


def matches_category(feed: Feed, category: str) -> bool:
    # Substring, not equality: "tech" also matches a "techcrunch" fallback label.
    return category in category_label(feed.url)


def matches_age(item: FeedItem, age: TimeFilter, now: Optional[datetime] = None) -> bool:
    """Whether ``item`` falls in the ``age`` bucket. Undated items never do."""
    published = parse_pub_date(item.pub_date)
    if published is None:
        return False

    if now is None:
        now = datetime.now(timezone.utc)
    elapsed = now - published

    if age is TimeFilter.TODAY:
        return elapsed <= DAY
    if age is TimeFilter.THIS_WEEK:
        return elapsed <= WEEK
    if age is TimeFilter.THIS_MONTH:
        return elapsed <= MONTH
    return elapsed > MONTH


def matches_author(item: FeedItem, has_author: bool) -> bool:
    return bool(item.author) == has_author


def matches_read_status(
    feed: Feed, item: FeedItem, read_items: Container[str], is_read: bool
) -> bool:
    return (item_key(feed, item) in read_items) == is_read


def matches_min_length(item: FeedItem, min_length: int, width: int = DEFAULT_WRAP_WIDTH) -> bool:
    if item.description is None:
        return False
    return plain_text_length(item.description, width) >= min_length


def matches(
    feed: Feed,
    item: FeedItem,
    read_items: Container[str],
    options: FilterOptions,
    now: Optional[datetime] = None,
    width: int = DEFAULT_WRAP_WIDTH,
) -> bool:
    """Evaluate every set facet of ``options`` against one item.

    Args:
        feed: Feed the item belongs to
        item: Item under test
        read_items: Durable keys of read items
        options: Active facets
        now: Reference time for the age facet (defaults to the current time)
        width: Wrap width of the plain-text rendering measured by the length facet

    Returns:
        True if the item passes every set facet
    """
    if options.category is not None and not matches_category(feed, options.category):
        return False
    if options.age is not None and not matches_age(item, options.age, now):
        return False
    if options.has_author is not None and not matches_author(item, options.has_author):
        return False
    if options.read_status is not None and not matches_read_status(
        feed, item, read_items, options.read_status
    ):
        return False
    if options.min_length is not None and not matches_min_length(item, options.min_length, width):
        return False
    return True


def filter_dashboard(
    feeds: Sequence[Feed],
    dashboard: Sequence[ItemRef],
    read_items: Container[str],
    options: FilterOptions,
    now: Optional[datetime] = None,
    width: int = DEFAULT_WRAP_WIDTH,
) -> List[ItemRef]:
    """Entries of ``dashboard`` that pass ``options``, in the same order.

    With no facet set this is a plain copy and no predicate runs.
    """
    if not options.is_active():
        return list(dashboard)

    if now is None:
        now = datetime.now(timezone.utc)

    result = []
    for ref in dashboard:
        pair = resolve(feeds, ref)
        if pair is not None and matches(pair[0], pair[1], read_items, options, now, width):
            result.append(ref)
    return result
