"""Unit tests for JSON state storage and OPML import."""

import json
from unittest.mock import patch

import pytest

from termfeed.errors import PersistenceError, TermfeedError
from termfeed.models.schemas import FeedCategory
from termfeed.services.opml import import_opml, parse_opml
from termfeed.storage.state_store import (
    BOOKMARKS_FILE,
    CATEGORIES_FILE,
    READ_ITEMS_FILE,
)

OPML = b"""<?xml version="1.0" encoding="UTF-8"?>
<opml version="2.0">
  <head><title>Subscriptions</title></head>
  <body>
    <outline text="Tech">
      <outline text="Rust" type="rss" xmlUrl="https://blog.rust-lang.org/feed.xml"/>
      <outline text="HN" type="rss" xmlUrl="https://news.ycombinator.com/rss"/>
    </outline>
    <outline text="HN again" type="rss" xmlUrl="https://news.ycombinator.com/rss"/>
    <outline text="Folder only"/>
  </body>
</opml>
"""


class TestStateStore:
    """Tests for loading and saving persisted collections."""

    def test_missing_files_load_empty(self, store):
        """Test missing files load as empty collections."""
        assert store.load_bookmarks() == []
        assert store.load_categories() == []
        assert store.load_read_items() == []

    def test_bookmarks_round_trip(self, store):
        """Test bookmarks are saved as a JSON list and reloaded."""
        store.save_bookmarks(["https://a.example.com/rss", "https://b.example.com/rss"])

        assert store.load_bookmarks() == ["https://a.example.com/rss", "https://b.example.com/rss"]
        assert json.loads((store.data_dir / BOOKMARKS_FILE).read_text()) == [
            "https://a.example.com/rss",
            "https://b.example.com/rss",
        ]

    def test_categories_round_trip(self, store):
        """Test categories reload equal to what was saved."""
        category = FeedCategory(name="Tech", feeds={"https://a.example.com/rss"}, expanded=False)

        store.save_categories([category])
        loaded = store.load_categories()

        assert loaded == [category]

    def test_corrupt_file_loads_empty(self, store):
        """Test invalid JSON loads as empty."""
        store.data_dir.mkdir(parents=True)
        (store.data_dir / READ_ITEMS_FILE).write_text("{not json")

        assert store.load_read_items() == []

    def test_wrong_shape_loads_empty(self, store):
        """Test a JSON object where a list is expected loads as empty."""
        store.data_dir.mkdir(parents=True)
        (store.data_dir / BOOKMARKS_FILE).write_text('{"url": "https://a.example.com"}')

        assert store.load_bookmarks() == []

    def test_malformed_category_skipped(self, store):
        """Test category entries without an id are skipped."""
        store.data_dir.mkdir(parents=True)
        (store.data_dir / CATEGORIES_FILE).write_text(
            json.dumps([{"name": "No id"}, {"id": "1", "name": "Ok", "feeds": []}])
        )

        loaded = store.load_categories()

        assert [c.name for c in loaded] == ["Ok"]

    def test_write_failure_raises_persistence_error(self, store):
        """Test a failed write raises and leaves no temp file."""
        with patch("termfeed.storage.state_store.os.replace", side_effect=OSError("read-only")):
            with pytest.raises(PersistenceError):
                store.save_bookmarks(["https://a.example.com/rss"])

        assert not (store.data_dir / BOOKMARKS_FILE).exists()
        assert list(store.data_dir.iterdir()) == []


class TestOpml:
    """Tests for OPML import."""

    def test_parse_nested_outlines(self):
        """Test nested outlines are collected in order without duplicates."""
        assert parse_opml(OPML) == [
            "https://blog.rust-lang.org/feed.xml",
            "https://news.ycombinator.com/rss",
        ]

    def test_not_opml(self):
        """Test a non-OPML document is rejected."""
        with pytest.raises(TermfeedError):
            parse_opml("<rss><channel></channel></rss>")

    def test_import_from_file(self, tmp_path):
        """Test importing reads feed URLs from a file."""
        path = tmp_path / "subs.opml"
        path.write_bytes(OPML)

        assert len(import_opml(path)) == 2

    def test_import_missing_file(self, tmp_path):
        """Test a missing file is reported."""
        with pytest.raises(TermfeedError, match="Cannot read OPML file"):
            import_opml(tmp_path / "missing.opml")
