"""Services for termfeed."""

from .categories import CategoryManager
from .dashboard import build_dashboard, resolve
from .domains import available_categories, category_label, extract_domain
from .feed_source import fetch_feed, parse_feed_content
from .filters import filter_dashboard, matches
from .identity import item_key
from .opml import import_opml, parse_opml
from .read_state import ReadStateTracker
from .search import search_feeds

__all__ = [
    "CategoryManager",
    "ReadStateTracker",
    "available_categories",
    "build_dashboard",
    "category_label",
    "extract_domain",
    "fetch_feed",
    "filter_dashboard",
    "import_opml",
    "item_key",
    "matches",
    "parse_feed_content",
    "parse_opml",
    "resolve",
    "search_feeds",
]
