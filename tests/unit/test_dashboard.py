"""Unit tests for dashboard aggregation and domain labels."""

from datetime import timedelta

from termfeed.models.schemas import Feed, FeedItem
from termfeed.services.dashboard import build_dashboard, resolve
from termfeed.services.domains import available_categories, category_label, extract_domain
from tests.conftest import make_item


class TestBuildDashboard:
    """Tests for merging feeds into one list."""

    def test_newest_first_across_feeds(self):
        """Test items from all feeds are merged newest first."""
        feeds = [
            Feed("https://a.example.com/rss", "A", [
                make_item("a-old", age=timedelta(days=3)),
                make_item("a-new", age=timedelta(hours=1)),
            ]),
            Feed("https://b.example.com/rss", "B", [
                make_item("b-mid", age=timedelta(days=1)),
            ]),
        ]

        assert build_dashboard(feeds) == [(0, 1), (1, 0), (0, 0)]

    def test_undated_items_last_in_load_order(self):
        """Test undated items follow dated ones in feed and item order."""
        feeds = [
            Feed("https://a.example.com/rss", "A", [
                make_item("a-undated"),
                make_item("a-dated", age=timedelta(days=10)),
            ]),
            Feed("https://b.example.com/rss", "B", [
                make_item("b-undated-1"),
                make_item("b-undated-2"),
            ]),
        ]

        assert build_dashboard(feeds) == [(0, 1), (0, 0), (1, 0), (1, 1)]

    def test_unrepresentable_date_sorts_as_undated(self):
        """Test a date that overflows in UTC is ordered with the undated items."""
        feeds = [
            Feed("https://a.example.com/rss", "A", [
                FeedItem("far-future", pub_date="9999-12-31T23:59:59-01:00"),
                make_item("dated", age=timedelta(days=1)),
            ]),
        ]

        assert build_dashboard(feeds) == [(0, 1), (0, 0)]

    def test_limit(self):
        """Test the dashboard is capped at the newest 100 items."""
        items = [make_item(f"item {i}", age=timedelta(minutes=i)) for i in range(150)]
        feeds = [Feed("https://a.example.com/rss", "A", items)]

        dashboard = build_dashboard(feeds)

        assert len(dashboard) == 100
        assert dashboard[0] == (0, 0)
        assert dashboard[-1] == (0, 99)
        assert len(build_dashboard(feeds, limit=5)) == 5

    def test_empty(self):
        """Test no feeds or empty feeds give an empty dashboard."""
        assert build_dashboard([]) == []
        assert build_dashboard([Feed("https://a.example.com/rss", "A", [])]) == []

    def test_resolve(self):
        """Test positional references resolve only while in range."""
        feeds = [Feed("https://a.example.com/rss", "A", [make_item("one")])]

        feed, item = resolve(feeds, (0, 0))
        assert item.title == "one"
        assert resolve(feeds, (0, 1)) is None
        assert resolve(feeds, (1, 0)) is None


class TestDomains:
    """Tests for domain extraction and heuristic category labels."""

    def test_extract_domain(self):
        """Test the scheme, www prefix and path are stripped."""
        assert extract_domain("https://www.nytimes.com/section/world") == "nytimes.com"
        assert extract_domain("http://blog.rust-lang.org/feed.xml") == "blog.rust-lang.org"
        assert extract_domain("example.com") == "example.com"

    def test_keyword_labels(self):
        """Test known host keywords map to their labels."""
        assert category_label("https://news.ycombinator.com/rss") == "news"
        assert category_label("https://feeds.wired.com/rss") == "tech"
        assert category_label("https://www.nature.com/nature.rss") == "science"
        assert category_label("https://www.espn.com/espn/rss/news") == "sports"

    def test_fallback_label(self):
        """Test unknown hosts are labelled by their first host label."""
        assert category_label("https://feeds.feedburner.com/TechCrunch") == "feeds"
        assert category_label("https://blog.rust-lang.org/feed.xml") == "blog"

    def test_available_categories_sorted_distinct(self):
        """Test available labels are sorted and de-duplicated."""
        feeds = [
            Feed("https://news.ycombinator.com/rss", "HN"),
            Feed("https://rss.nytimes.com/x.xml", "NYT"),
            Feed("https://blog.rust-lang.org/feed.xml", "Rust"),
        ]

        assert available_categories(feeds) == ["blog", "news"]
