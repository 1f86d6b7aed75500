"""Exception types shared across termfeed.

Everything raised here is non-fatal: the interactive loop catches it, shows
the message for a few seconds and carries on.
"""


class TermfeedError(Exception):
    """Base class for all termfeed errors."""


class FetchError(TermfeedError):
    """A feed could not be fetched or parsed."""

    def __init__(self, url: str, message: str):
        super().__init__(message)
        self.url = url


class ValidationError(TermfeedError, ValueError):
    """A user-initiated operation was rejected. No state was changed."""


class PersistenceError(TermfeedError):
    """Saving state to disk failed. The in-memory change is kept."""
