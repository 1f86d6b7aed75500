"""Session state for the interactive reader.

AppState is the single owner of everything that changes while the reader
runs: loaded feeds, bookmarks, categories, read state, filters, search and
the current view/input mode. The key handler receives it explicitly; nothing
here is global.
"""

import logging
import time
from datetime import datetime
from typing import Callable, List, Optional, Tuple

import click

from termfeed.config import AppConfig, get_config
from termfeed.errors import FetchError, ValidationError
from termfeed.models.schemas import (
    CategoryAction,
    Feed,
    FeedItem,
    FilterOptions,
    InputMode,
    ItemRef,
    View,
)
from termfeed.services.categories import CategoryManager
from termfeed.services.dashboard import build_dashboard, resolve
from termfeed.services.domains import available_categories
from termfeed.services.feed_source import fetch_feed
from termfeed.services.filters import filter_dashboard
from termfeed.services.read_state import ReadStateTracker
from termfeed.services.search import search_feeds
from termfeed.storage.state_store import StateStore

logger = logging.getLogger(__name__)

Fetcher = Callable[[str], Feed]

LOADING_FRAMES = 10


class AppState:
    def __init__(
        self,
        config: Optional[AppConfig] = None,
        store: Optional[StateStore] = None,
        fetcher: Optional[Fetcher] = None,
        bookmarks: Optional[List[str]] = None,
        categories: Optional[CategoryManager] = None,
        read_items: Optional[ReadStateTracker] = None,
    ):
        self.config = config or get_config()
        self.store = store
        self.fetcher = fetcher or (lambda url: fetch_feed(url, timeout=self.config.fetch_timeout))

        self.feeds: List[Feed] = []
        self.bookmarks: List[str] = list(bookmarks or [])
        self.categories = categories or CategoryManager(store=store)
        self.read_items = read_items or ReadStateTracker(store=store)

        self.view = View.DASHBOARD
        self.input_mode = InputMode.NORMAL
        self.input = ""
        self.selected_feed: Optional[int] = None
        self.selected_item: Optional[int] = None
        self.category_action: Optional[CategoryAction] = None

        self.search_query = ""
        self.is_searching = False
        self.search_results: List[ItemRef] = []

        self.dashboard_items: List[ItemRef] = []
        self.filtered_dashboard_items: List[ItemRef] = []
        self.filter_options = FilterOptions()

        self.is_loading = False
        self.loading_indicator = 0
        self.error: Optional[str] = None
        self.error_since: Optional[float] = None

        self.detail_scroll = 0
        self.detail_max_scroll = 0

    @classmethod
    def from_store(
        cls,
        store: StateStore,
        config: Optional[AppConfig] = None,
        fetcher: Optional[Fetcher] = None,
    ) -> "AppState":
        """Build a session from persisted bookmarks, categories and read state."""
        return cls(
            config=config,
            store=store,
            fetcher=fetcher,
            bookmarks=store.load_bookmarks(),
            categories=CategoryManager(store.load_categories(), store=store),
            read_items=ReadStateTracker(store.load_read_items(), store=store),
        )

    # ---- Errors and ticks ----

    def set_error(self, message: str, now: Optional[float] = None) -> None:
        logger.warning(message)
        self.error = message
        self.error_since = time.monotonic() if now is None else now

    def clear_error(self) -> None:
        self.error = None
        self.error_since = None

    def tick(self, now: Optional[float] = None) -> None:
        """Advance the loading animation and expire a stale error message."""
        if now is None:
            now = time.monotonic()

        if self.is_loading:
            self.loading_indicator = (self.loading_indicator + 1) % LOADING_FRAMES

        if self.error is not None and self.error_since is not None:
            if now - self.error_since >= self.config.error_display_seconds:
                self.clear_error()

    # ---- Feeds ----

    def _fetch_all(self) -> List[Feed]:
        """Fetch every bookmark in order. Each failure replaces the shown error."""
        feeds = []
        for url in self.bookmarks:
            try:
                feeds.append(self.fetcher(url))
            except FetchError as e:
                self.set_error(f"Failed to refresh feed {url}: {e}")
        return feeds

    def load_bookmarked_feeds(self) -> None:
        self.feeds = self._fetch_all()
        logger.info(f"Loaded {len(self.feeds)} of {len(self.bookmarks)} bookmarked feeds")
        self.update_dashboard()

    def refresh_feeds(self) -> None:
        """Refetch every bookmark and replace the loaded feeds wholesale."""
        self.is_loading = True
        try:
            self.feeds = self._fetch_all()
            if not self.feeds:
                self.selected_feed = None
            elif self.selected_feed is not None:
                self.selected_feed = min(self.selected_feed, len(self.feeds) - 1)
            self.update_dashboard()
            if self.is_searching:
                self.search_results = search_feeds(self.feeds, self.search_query)
        finally:
            self.is_loading = False

    def add_feed(self, url: str) -> Feed:
        """Fetch ``url``, add it to the loaded feeds and bookmark it.

        Raises:
            ValidationError: If the feed is already loaded
            FetchError: If the feed cannot be fetched
            PersistenceError: If the bookmark list cannot be saved
        """
        url = url.strip()
        if any(feed.url == url for feed in self.feeds):
            raise ValidationError("Feed is already in the list")

        feed = self.fetcher(url)
        self.feeds.append(feed)
        if url not in self.bookmarks:
            self.bookmarks.append(url)
        logger.info(f"Added feed '{feed.title}' ({url})")

        self.update_dashboard()
        self._save_bookmarks()
        return feed

    def remove_current_feed(self) -> Optional[Feed]:
        """Drop the selected feed, its bookmark and its category memberships."""
        idx = self.selected_feed
        if idx is None or not 0 <= idx < len(self.feeds):
            return None

        feed = self.feeds.pop(idx)
        if feed.url in self.bookmarks:
            self.bookmarks.remove(feed.url)

        if self.feeds:
            if idx >= len(self.feeds):
                self.selected_feed = len(self.feeds) - 1
        else:
            self.selected_feed = None
            self.view = View.DASHBOARD

        self.update_dashboard()
        if self.is_searching:
            self.search_results = search_feeds(self.feeds, self.search_query)
        logger.info(f"Removed feed {feed.url}")

        try:
            self._save_bookmarks()
        finally:
            self.categories.forget_feed(feed.url)
        return feed

    def import_urls(self, urls: List[str]) -> int:
        """Bookmark every URL not bookmarked yet. Returns how many were new."""
        added = [url for url in dict.fromkeys(urls) if url not in self.bookmarks]
        if added:
            self.bookmarks.extend(added)
            self._save_bookmarks()
        return len(added)

    def _save_bookmarks(self) -> None:
        if self.store is not None:
            self.store.save_bookmarks(self.bookmarks)

    def current_feed(self) -> Optional[Feed]:
        if self.selected_feed is None or not 0 <= self.selected_feed < len(self.feeds):
            return None
        return self.feeds[self.selected_feed]

    def current_item(self) -> Optional[FeedItem]:
        feed = self.current_feed()
        if feed is None or self.selected_item is None:
            return None
        if not 0 <= self.selected_item < len(feed.items):
            return None
        return feed.items[self.selected_item]

    def open_current_item_in_browser(self) -> None:
        item = self.current_item()
        if item is not None and item.link:
            click.launch(item.link)

    # ---- Dashboard, filters, search ----

    def update_dashboard(self) -> None:
        self.dashboard_items = build_dashboard(self.feeds, self.config.dashboard_limit)
        self.apply_filters()

    def apply_filters(self, now: Optional[datetime] = None) -> None:
        self.filtered_dashboard_items = filter_dashboard(
            self.feeds,
            self.dashboard_items,
            self.read_items,
            self.filter_options,
            now,
            width=self.config.wrap_width,
        )

    def available_categories(self) -> List[str]:
        return available_categories(self.feeds)

    def cycle_category_filter(self) -> None:
        """Step the category facet through the available labels, then off."""
        labels = self.available_categories()
        current = self.filter_options.category

        if not labels:
            self.filter_options.category = None
        elif current is None or current not in labels:
            self.filter_options.category = labels[0]
        else:
            idx = labels.index(current)
            self.filter_options.category = labels[idx + 1] if idx + 1 < len(labels) else None

        self.apply_filters()

    def search(self, query: str) -> None:
        self.search_query = query.lower()
        self.is_searching = bool(self.search_query)
        self.search_results = search_feeds(self.feeds, self.search_query)
        logger.debug(f"Search '{self.search_query}' -> {len(self.search_results)} results")

    def clear_search(self) -> None:
        self.search_query = ""
        self.is_searching = False
        self.search_results = []

    def visible_items(self) -> List[ItemRef]:
        """What the dashboard shows: search results, else the filtered dashboard."""
        if self.is_searching:
            return self.search_results
        return self.filtered_dashboard_items

    def visible_item(self, idx: int) -> Optional[Tuple[Feed, FeedItem]]:
        items = self.visible_items()
        if not 0 <= idx < len(items):
            return None
        return resolve(self.feeds, items[idx])

    def filter_stats(self) -> Tuple[int, int, int]:
        """(active facets, items shown, items before filtering)."""
        if self.is_searching:
            shown = total = len(self.search_results)
        else:
            shown = len(self.filtered_dashboard_items)
            total = len(self.dashboard_items)
        return self.filter_options.active_count(), shown, total

    # ---- Read state ----

    def mark_read(self, feed_idx: int, item_idx: int) -> bool:
        pair = resolve(self.feeds, (feed_idx, item_idx))
        if pair is None:
            return False
        was_read = self.read_items.is_read(*pair)
        try:
            return self.read_items.mark_read(*pair)
        finally:
            # The key stays in memory even when saving fails.
            if not was_read and self.filter_options.read_status is not None:
                self.apply_filters()

    def is_read(self, feed_idx: int, item_idx: int) -> bool:
        pair = resolve(self.feeds, (feed_idx, item_idx))
        return pair is not None and self.read_items.is_read(*pair)

    # ---- Detail view ----

    def enter_detail_view(self, feed_idx: int, item_idx: int) -> None:
        """Show an item in the detail view and mark it read."""
        self.selected_feed = feed_idx
        self.selected_item = item_idx
        self.detail_scroll = 0
        self.view = View.FEED_ITEM_DETAIL
        self.mark_read(feed_idx, item_idx)

    def exit_detail_view(self, new_view: View) -> None:
        self.detail_scroll = 0
        self.view = new_view

    def update_detail_max_scroll(self, content_lines: int, viewport_height: int) -> None:
        self.detail_max_scroll = max(0, content_lines - viewport_height)
        self.clamp_detail_scroll()

    def clamp_detail_scroll(self) -> None:
        self.detail_scroll = max(0, min(self.detail_scroll, self.detail_max_scroll))

    def scroll_detail(self, delta: int) -> None:
        self.detail_scroll += delta
        self.clamp_detail_scroll()
