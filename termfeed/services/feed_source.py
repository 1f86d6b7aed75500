"""Feed source service.

This module fetches an RSS/Atom feed over HTTP and turns it into a Feed.
Every failure is raised as FetchError so the caller can show it and move on.
"""

import logging
from calendar import timegm
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Any, Dict, Optional

import feedparser
import httpx

from termfeed.errors import FetchError
from termfeed.models.schemas import Feed, FeedItem
from termfeed.services.dates import format_relative_date, parse_pub_date

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 15.0
MIN_BODY_BYTES = 100
SNIFF_BYTES = 200

REQUEST_HEADERS = {
    "User-Agent": "Mozilla/5.0 (compatible; termfeed/0.1; terminal feed reader)",
    "Accept": "application/rss+xml, application/atom+xml, application/xml, text/xml, */*",
    "Accept-Language": "en-US,en;q=0.9",
    "Cache-Control": "no-cache",
}


def fetch_feed(url: str, timeout: float = DEFAULT_TIMEOUT) -> Feed:
    """Fetch and parse the feed at ``url``.

    Args:
        url: Feed URL
        timeout: HTTP timeout in seconds

    Returns:
        The parsed Feed

    Raises:
        FetchError: On transport errors, non-success status, a body that is
            too short or looks like an HTML page, or content that is not a feed
    """
    logger.info(f"Fetching feed: {url}")

    try:
        with httpx.Client(
            follow_redirects=True,
            timeout=timeout,
            headers=REQUEST_HEADERS,
        ) as client:
            response = client.get(url)
    # A malformed URL raises InvalidURL, or UnicodeError from the idna codec.
    except (httpx.HTTPError, httpx.InvalidURL, UnicodeError) as e:
        logger.warning(f"Failed to fetch feed {url}: {e}")
        raise FetchError(url, f"Failed to fetch feed: {e}") from e

    if not response.is_success:
        raise FetchError(url, f"HTTP error {response.status_code}: Failed to fetch feed from {url}")

    content = response.content
    _check_body(url, content, str(response.url))

    return parse_feed_content(url, content)


def _check_body(url: str, content: bytes, final_url: str) -> None:
    if len(content) < MIN_BODY_BYTES:
        raise FetchError(
            url,
            f"Response too short ({len(content)} bytes), might be empty or an error page",
        )

    head = content[:SNIFF_BYTES].decode("utf-8", errors="replace").lstrip().lower()
    if head.startswith("<!doctype html") or head.startswith("<html"):
        raise FetchError(
            url,
            "Received HTML page instead of RSS/Atom feed. URL might be incorrect "
            f"or require authentication. Final URL: {final_url}",
        )


def parse_feed_content(url: str, content: bytes, now: Optional[datetime] = None) -> Feed:
    """Parse raw feed bytes into a Feed.

    Raises:
        FetchError: If the content is not a usable RSS/Atom document
    """
    parsed = feedparser.parse(content)

    title = (parsed.feed.get("title") or "").strip()
    if parsed.bozo and not parsed.entries and not title:
        logger.warning(f"Feed parsing error for {url}: {parsed.get('bozo_exception')}")
        raise FetchError(url, f"Failed to parse feed (RSS/Atom) from URL: {url}")

    items = [_item_from_entry(entry, now) for entry in parsed.entries]
    logger.info(f"Parsed {len(items)} items from {url}")

    return Feed(url=url, title=title or "Untitled Feed", items=items)


def _item_from_entry(entry: Dict[str, Any], now: Optional[datetime]) -> FeedItem:
    title = (entry.get("title") or "").strip() or "Untitled"

    link = (entry.get("link") or "").strip()
    if not link:
        for candidate in entry.get("links", []):
            if candidate.get("href"):
                link = candidate["href"].strip()
                break

    description = None
    content = entry.get("content")
    if content:
        description = content[0].get("value", "")
    elif entry.get("summary") is not None:
        description = entry.get("summary")

    pub_date = _entry_date(entry)
    dt = parse_pub_date(pub_date)
    formatted_date = format_relative_date(dt, now) if dt else None

    return FeedItem(
        title=title,
        link=link or None,
        description=description,
        pub_date=pub_date,
        author=_entry_author(entry),
        formatted_date=formatted_date,
    )


def _entry_date(entry: Dict[str, Any]) -> Optional[str]:
    """Publication date text, preferring published over updated.

    When feedparser understood the date, it is normalized to RFC 2822 so the
    rest of the reader sees a single format; otherwise the raw text is kept.
    """
    for field in ("published", "updated"):
        struct = entry.get(f"{field}_parsed")
        if struct:
            try:
                dt = datetime.fromtimestamp(timegm(struct), tz=timezone.utc)
            except (OverflowError, ValueError, OSError):
                dt = None
            if dt is not None:
                return format_datetime(dt)

        raw = entry.get(field)
        if raw:
            return str(raw).strip()

    return None


def _entry_author(entry: Dict[str, Any]) -> Optional[str]:
    author = (entry.get("author") or "").strip()
    if author:
        return author

    for detail in entry.get("authors", []):
        name = (detail.get("name") or "").strip()
        if name:
            return name
        email = (detail.get("email") or "").strip()
        if email:
            return email

    return None
