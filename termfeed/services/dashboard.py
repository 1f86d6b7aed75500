"""Cross-feed dashboard aggregation."""

from datetime import datetime
from typing import List, Optional, Sequence, Tuple

from termfeed.models.schemas import Feed, FeedItem, ItemRef
from termfeed.services.dates import parse_pub_date

DASHBOARD_LIMIT = 100


def build_dashboard(feeds: Sequence[Feed], limit: int = DASHBOARD_LIMIT) -> List[ItemRef]:
    """Merge every item of ``feeds`` into one newest-first list.

    Items with a parseable date come first, newest to oldest. Undated items
    follow in load order (feed order, then item order). At most ``limit``
    entries are returned.
    """
    entries: List[Tuple[int, int, Optional[datetime]]] = []
    for feed_idx, feed in enumerate(feeds):
        for item_idx, item in enumerate(feed.items):
            entries.append((feed_idx, item_idx, parse_pub_date(item.pub_date)))

    def sort_key(entry: Tuple[int, int, Optional[datetime]]) -> Tuple[int, float]:
        date = entry[2]
        if date is None:
            return (1, 0.0)
        return (0, -date.timestamp())

    # sorted() is stable, so undated items keep their encounter order.
    ordered = sorted(entries, key=sort_key)
    return [(feed_idx, item_idx) for feed_idx, item_idx, _ in ordered[:limit]]


def resolve(feeds: Sequence[Feed], ref: ItemRef) -> Optional[Tuple[Feed, FeedItem]]:
    """Look up the (feed, item) a positional reference points at, if still valid."""
    feed_idx, item_idx = ref
    if not 0 <= feed_idx < len(feeds):
        return None
    feed = feeds[feed_idx]
    if not 0 <= item_idx < len(feed.items):
        return None
    return feed, feed.items[item_idx]
