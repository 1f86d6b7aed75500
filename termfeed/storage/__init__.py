"""Storage layer for termfeed."""

from .state_store import (
    BOOKMARKS_FILE,
    CATEGORIES_FILE,
    READ_ITEMS_FILE,
    StateStore,
)

__all__ = [
    "BOOKMARKS_FILE",
    "CATEGORIES_FILE",
    "READ_ITEMS_FILE",
    "StateStore",
]
