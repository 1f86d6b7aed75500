"""Data models for termfeed.

This module defines the core data structures: feeds and their items, user
categories, filter facets, and the view/input-mode enums that drive the
interactive session.
"""

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Set, Tuple, Union

# (feed_index, item_index) into AppState.feeds. Positional only: never persist.
ItemRef = Tuple[int, int]


@dataclass(frozen=True)
class FeedItem:
    """A single entry of a feed. Immutable once built by the feed source."""

    title: str
    link: Optional[str] = None
    description: Optional[str] = None  # raw HTML
    pub_date: Optional[str] = None  # raw RFC2822 / RFC3339 text
    author: Optional[str] = None
    formatted_date: Optional[str] = None


@dataclass
class Feed:
    """A fetched feed. ``url`` is its only durable identity."""

    url: str
    title: str
    items: List[FeedItem] = field(default_factory=list)


@dataclass
class FeedCategory:
    """A user-defined, named group of feed URLs."""

    name: str
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    feeds: Set[str] = field(default_factory=set)
    expanded: bool = True

    def add_feed(self, url: str) -> None:
        self.feeds.add(url)

    def remove_feed(self, url: str) -> bool:
        if url not in self.feeds:
            return False
        self.feeds.remove(url)
        return True

    def contains_feed(self, url: str) -> bool:
        return url in self.feeds

    def feed_count(self) -> int:
        return len(self.feeds)

    def toggle_expanded(self) -> None:
        self.expanded = not self.expanded

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "feeds": sorted(self.feeds),
            "expanded": self.expanded,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FeedCategory":
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            feeds={str(url) for url in data.get("feeds", [])},
            expanded=bool(data.get("expanded", True)),
        )


class TimeFilter(Enum):
    """Age buckets for the age facet."""

    TODAY = "Today"
    THIS_WEEK = "This Week"
    THIS_MONTH = "This Month"
    OLDER = "Older than a month"


LENGTH_LABELS = {100: "Short", 500: "Medium", 1000: "Long"}


@dataclass
class FilterOptions:
    """Independent filter facets, combined with AND. ``None`` means unset."""

    category: Optional[str] = None
    age: Optional[TimeFilter] = None
    has_author: Optional[bool] = None
    read_status: Optional[bool] = None
    min_length: Optional[int] = None

    def _facets(self) -> List[Any]:
        return [self.category, self.age, self.has_author, self.read_status, self.min_length]

    def is_active(self) -> bool:
        return self.active_count() > 0

    def active_count(self) -> int:
        return sum(1 for facet in self._facets() if facet is not None)

    def reset(self) -> None:
        self.category = None
        self.age = None
        self.has_author = None
        self.read_status = None
        self.min_length = None

    def summary(self) -> str:
        """Human readable description of the active facets."""
        parts = []

        if self.category is not None:
            parts.append(f"Category: {self.category}")
        if self.age is not None:
            parts.append(f"Age: {self.age.value}")
        if self.has_author is not None:
            parts.append(f"Author: {'With author' if self.has_author else 'No author'}")
        if self.read_status is not None:
            parts.append(f"Status: {'Read' if self.read_status else 'Unread'}")
        if self.min_length is not None:
            parts.append(f"Length: {LENGTH_LABELS.get(self.min_length, 'Custom')}")

        if not parts:
            return "No filters active"
        return " | ".join(parts)


class View(Enum):
    DASHBOARD = "dashboard"
    FEED_LIST = "feed_list"
    FEED_ITEMS = "feed_items"
    FEED_ITEM_DETAIL = "feed_item_detail"
    CATEGORY_MANAGEMENT = "category_management"


class InputMode(Enum):
    NORMAL = "normal"
    INSERT_URL = "insert_url"
    SEARCH_MODE = "search"
    FILTER_MODE = "filter"
    CATEGORY_NAME_INPUT = "category_name"


@dataclass(frozen=True)
class CreateCategory:
    """Pending action: the name being typed creates a new category."""


@dataclass(frozen=True)
class RenameCategory:
    """Pending action: the name being typed renames category ``index``."""

    index: int


@dataclass(frozen=True)
class AddFeedToCategory:
    """Pending action: Enter assigns ``url`` to the selected category."""

    url: str


CategoryAction = Union[CreateCategory, RenameCategory, AddFeedToCategory]
