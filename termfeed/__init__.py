"""termfeed - a terminal RSS/Atom feed reader."""

__version__ = "0.1.0"
