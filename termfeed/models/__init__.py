"""Data models for termfeed."""
