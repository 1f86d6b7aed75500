"""Substring search across every loaded feed."""

from typing import List, Sequence

from termfeed.models.schemas import Feed, ItemRef


def search_feeds(feeds: Sequence[Feed], query: str) -> List[ItemRef]:
    """Find items matching ``query``, case-insensitively.

    A feed whose title contains the query contributes all of its items.
    Otherwise an item matches on its title or its description. Results are in
    feed order, then item order, and are not capped. An empty query returns
    an empty list; callers treat that as "not searching".
    """
    needle = query.lower()
    if not needle:
        return []

    results: List[ItemRef] = []
    for feed_idx, feed in enumerate(feeds):
        if needle in feed.title.lower():
            results.extend((feed_idx, item_idx) for item_idx in range(len(feed.items)))
            continue

        for item_idx, item in enumerate(feed.items):
            if needle in item.title.lower() or (
                item.description is not None and needle in item.description.lower()
            ):
                results.append((feed_idx, item_idx))

    return results
