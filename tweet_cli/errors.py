"""Exceptions raised by tweet-cli."""
from __future__ import annotations


class TweetCliError(Exception):
    """Base class for tweet-cli errors."""


class CredentialsError(TweetCliError):
    """Twitter credentials are missing or incomplete."""


class SplitError(TweetCliError):
    """No valid prefix could be found for the remaining text."""

    def __init__(self, remaining: str, valid_range: tuple[int, int]):
        self.remaining = remaining
        self.valid_range = valid_range
        super().__init__(
            f"Cannot split text: no valid prefix for {remaining[:20]!r} (range {valid_range})"
        )


class ThreadBrokenError(TweetCliError):
    """A post in a thread failed and the rest of the thread was not sent."""

    def __init__(self, index: int, results: list):
        self.index = index
        self.results = results
        reason = results[-1].reason if results else None
        super().__init__(f"Thread broken at segment {index + 1}: {reason}")
