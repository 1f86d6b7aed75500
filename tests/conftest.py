"""Shared fixtures for termfeed tests."""

from datetime import datetime, timedelta, timezone
from email.utils import format_datetime

import pytest

from termfeed.config import AppConfig
from termfeed.errors import FetchError
from termfeed.models.schemas import Feed, FeedItem
from termfeed.storage.state_store import StateStore

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


def rfc2822(delta: timedelta, now: datetime = NOW) -> str:
    """RFC 2822 date text ``delta`` before ``now``."""
    return format_datetime(now - delta)


def make_item(title: str, link=None, description=None, age=None, author=None) -> FeedItem:
    return FeedItem(
        title=title,
        link=link,
        description=description,
        pub_date=rfc2822(age) if age is not None else None,
        author=author,
    )


class FakeFetcher:
    """Stands in for the HTTP fetcher. Unknown URLs raise FetchError."""

    def __init__(self, feeds=None):
        self.feeds = dict(feeds or {})
        self.calls = []

    def __call__(self, url: str) -> Feed:
        self.calls.append(url)
        feed = self.feeds.get(url)
        if feed is None:
            raise FetchError(url, f"HTTP error 404: Failed to fetch feed from {url}")
        return feed


@pytest.fixture
def config(tmp_path):
    """Configuration rooted in a temporary data directory."""
    return AppConfig(data_dir=tmp_path / "data")


@pytest.fixture
def store(config):
    return StateStore(config.data_dir)
