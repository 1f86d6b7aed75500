"""Durable identity for feed items.

Items have no primary key and their position changes on every refresh, so
read state is keyed on the link, or on ``<feed url>_<item title>`` when the
item has no link.
"""

from termfeed.models.schemas import Feed, FeedItem


def item_key(feed: Feed, item: FeedItem) -> str:
    if item.link:
        return item.link
    return f"{feed.url}_{item.title}"
