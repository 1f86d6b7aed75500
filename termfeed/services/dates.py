"""Publication date helpers.

Feeds carry dates as raw text, RFC 2822 for RSS and RFC 3339 for Atom.
Anything that does not parse is treated as "no date" by callers.
"""

from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Optional


def parse_pub_date(date_str: Optional[str]) -> Optional[datetime]:
    """Parse a feed publication date into an aware UTC datetime.

    Args:
        date_str: Raw date text from the feed

    Returns:
        datetime if parsed successfully, None otherwise
    """
    if not date_str or not date_str.strip():
        return None

    date_str = date_str.strip()
    parsed: Optional[datetime] = None

    # Try RFC 2822 format (common in RSS)
    try:
        parsed = parsedate_to_datetime(date_str)
    except (ValueError, TypeError, IndexError, OverflowError):
        parsed = None

    # Try ISO format (Atom / RFC 3339)
    if parsed is None:
        try:
            parsed = datetime.fromisoformat(date_str.replace("Z", "+00:00"))
        except (ValueError, OverflowError):
            return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    try:
        return parsed.astimezone(timezone.utc)
    except OverflowError:
        # Representable locally but not once shifted to UTC (year 1 or 9999).
        return None


def format_relative_date(dt: datetime, now: Optional[datetime] = None) -> str:
    """Render ``dt`` relative to ``now``: minutes, hours or days ago, else the date."""
    if now is None:
        now = datetime.now(timezone.utc)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)

    diff = now - dt
    minutes = int(diff.total_seconds() // 60)

    if minutes < 60:
        return f"{minutes} minutes ago"
    if minutes < 60 * 24:
        return f"{minutes // 60} hours ago"
    if diff.days < 7:
        return f"{diff.days} days ago"
    return dt.strftime("%B %d, %Y")
