"""Terminal user interface for termfeed."""
