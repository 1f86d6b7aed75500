"""Read-state tracking keyed on durable item identity."""

import logging
from typing import Iterable, Iterator, List, Optional

from termfeed.models.schemas import Feed, FeedItem
from termfeed.services.identity import item_key
from termfeed.storage.state_store import StateStore

logger = logging.getLogger(__name__)


class ReadStateTracker:
    """Append-only set of read item keys.

    There is no way to mark an item unread again.
    """

    def __init__(self, keys: Iterable[str] = (), store: Optional[StateStore] = None):
        self._keys: List[str] = []
        self._index = set()
        self.store = store
        for key in keys:
            if key and key not in self._index:
                self._index.add(key)
                self._keys.append(key)

    def __contains__(self, key: object) -> bool:
        return key in self._index

    def __len__(self) -> int:
        return len(self._keys)

    def __iter__(self) -> Iterator[str]:
        return iter(self._keys)

    def is_read(self, feed: Feed, item: FeedItem) -> bool:
        return item_key(feed, item) in self._index

    def mark_read(self, feed: Feed, item: FeedItem) -> bool:
        """Record ``item`` as read and persist the set.

        Returns:
            True if the item was newly marked, False if it already was read

        Raises:
            PersistenceError: If saving fails. The item stays marked in memory.
        """
        key = item_key(feed, item)
        if not key or key in self._index:
            return False

        self._index.add(key)
        self._keys.append(key)
        logger.debug(f"Marked read: {key}")

        if self.store is not None:
            self.store.save_read_items(self._keys)
        return True
