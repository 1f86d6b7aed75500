"""Unit tests for the filter engine."""

from datetime import timedelta

import pytest

from termfeed.models.schemas import Feed, FilterOptions, TimeFilter
from termfeed.services.filters import filter_dashboard, matches, matches_age
from tests.conftest import NOW, make_item

HN = "https://news.ycombinator.com/rss"
RUST = "https://blog.rust-lang.org/feed.xml"


@pytest.fixture
def feeds():
    return [
        Feed(HN, "Hacker News", [
            make_item("Fresh", link="https://hn.example/1", age=timedelta(hours=2),
                      author="pg", description="<p>" + "x" * 150 + "</p>"),
            make_item("Old", link="https://hn.example/2", age=timedelta(days=45)),
        ]),
        Feed(RUST, "Rust Blog", [
            make_item("Release", link="https://rust.example/1", age=timedelta(days=3),
                      author="Rust Team", description="short"),
            make_item("Undated", link="https://rust.example/2"),
        ]),
    ]


DASHBOARD = [(0, 0), (1, 0), (0, 1), (1, 1)]


class TestAgeFacet:
    """Tests for the age buckets."""

    def test_just_over_a_day_is_not_today(self):
        """Test an item 24h01m old fails Today and passes This Week."""
        item = make_item("x", age=timedelta(hours=24, minutes=1))

        assert not matches_age(item, TimeFilter.TODAY, NOW)
        assert matches_age(item, TimeFilter.THIS_WEEK, NOW)
        assert matches_age(item, TimeFilter.THIS_MONTH, NOW)
        assert not matches_age(item, TimeFilter.OLDER, NOW)

    def test_exactly_a_day_is_today(self):
        """Test an item exactly 24 hours old still counts as Today."""
        item = make_item("x", age=timedelta(hours=24))

        assert matches_age(item, TimeFilter.TODAY, NOW)

    def test_exactly_a_week_is_this_week(self):
        """Test an item exactly seven days old still counts as This Week."""
        item = make_item("x", age=timedelta(days=7))

        assert matches_age(item, TimeFilter.THIS_WEEK, NOW)
        assert not matches_age(item, TimeFilter.TODAY, NOW)

    def test_exactly_a_month_is_not_older(self):
        """Test an item exactly 30 days old is This Month and not Older."""
        item = make_item("x", age=timedelta(days=30))

        assert matches_age(item, TimeFilter.THIS_MONTH, NOW)
        assert not matches_age(item, TimeFilter.OLDER, NOW)

    def test_older_than_a_month(self):
        """Test an item 31 days old is Older and not This Month."""
        item = make_item("x", age=timedelta(days=31))

        assert not matches_age(item, TimeFilter.THIS_MONTH, NOW)
        assert matches_age(item, TimeFilter.OLDER, NOW)

    def test_undated_fails_every_bucket(self):
        """Test an undated item fails every age bucket, including Older."""
        item = make_item("x")

        for age in TimeFilter:
            assert not matches_age(item, age, NOW)


class TestFilterDashboard:
    """Tests for combining facets over the dashboard."""

    def test_no_facets_is_identity(self, feeds):
        """Test an inactive filter returns a copy of the dashboard."""
        result = filter_dashboard(feeds, DASHBOARD, set(), FilterOptions(), NOW)

        assert result == DASHBOARD
        assert result is not DASHBOARD

    def test_category_facet(self, feeds):
        """Test the category facet matches the feed's host label."""
        result = filter_dashboard(feeds, DASHBOARD, set(), FilterOptions(category="blog"), NOW)

        assert result == [(1, 0), (1, 1)]

    def test_author_facet(self, feeds):
        """Test the author facet splits items with and without an author."""
        with_author = filter_dashboard(feeds, DASHBOARD, set(), FilterOptions(has_author=True), NOW)
        without = filter_dashboard(feeds, DASHBOARD, set(), FilterOptions(has_author=False), NOW)

        assert with_author == [(0, 0), (1, 0)]
        assert without == [(0, 1), (1, 1)]

    def test_read_status_facet(self, feeds):
        """Test the read status facet uses the durable read keys."""
        read = {"https://hn.example/2"}

        assert filter_dashboard(feeds, DASHBOARD, read, FilterOptions(read_status=True), NOW) == [(0, 1)]
        assert filter_dashboard(feeds, DASHBOARD, read, FilterOptions(read_status=False), NOW) == [
            (0, 0), (1, 0), (1, 1),
        ]

    def test_min_length_facet(self, feeds):
        """Test length counts rendered text; items without a description fail."""
        result = filter_dashboard(feeds, DASHBOARD, set(), FilterOptions(min_length=100), NOW)

        assert result == [(0, 0)]

    def test_min_length_measured_at_wrap_width(self, feeds):
        """Test the length facet counts the line breaks added at the given width."""
        options = FilterOptions(min_length=152)

        # 150 unbroken characters wrap onto four lines at width 40.
        assert filter_dashboard(feeds, DASHBOARD, set(), options, NOW, width=40) == [(0, 0)]
        assert filter_dashboard(feeds, DASHBOARD, set(), options, NOW, width=200) == []

    def test_facets_combine_with_and(self, feeds):
        """Test several facets must all match."""
        options = FilterOptions(age=TimeFilter.THIS_WEEK, has_author=True, category="news")

        assert filter_dashboard(feeds, DASHBOARD, set(), options, NOW) == [(0, 0)]

    def test_order_preserved(self, feeds):
        """Test filtering keeps the dashboard order."""
        dashboard = [(1, 1), (0, 1), (1, 0), (0, 0)]
        options = FilterOptions(has_author=False)

        assert filter_dashboard(feeds, dashboard, set(), options, NOW) == [(1, 1), (0, 1)]

    def test_stale_refs_dropped(self, feeds):
        """Test references to missing feeds are skipped."""
        options = FilterOptions(has_author=False)

        assert filter_dashboard(feeds, [(5, 0), (0, 1)], set(), options, NOW) == [(0, 1)]


class TestMatches:
    """Tests for single-item evaluation."""

    def test_links_missing_use_feed_scoped_key(self):
        """Test read status falls back to the feed URL and title key."""
        feed = Feed(RUST, "Rust Blog", [make_item("No link")])
        options = FilterOptions(read_status=True)

        assert matches(feed, feed.items[0], {f"{RUST}_No link"}, options, NOW)
        assert not matches(feed, feed.items[0], set(), options, NOW)

    def test_no_facets_matches_every_item(self, feeds):
        """Test an empty filter accepts any item, dated or not."""
        varied = Feed(RUST, "Rust Blog", [
            make_item("No link, no body"),
            make_item("Empty body", link="https://rust.example/3", description=""),
            make_item("Ancient", link="https://rust.example/4", age=timedelta(days=4000)),
        ])

        for feed in [*feeds, varied]:
            for item in feed.items:
                assert matches(feed, item, set(), FilterOptions(), NOW)
