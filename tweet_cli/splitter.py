"""Split text into a chain of valid tweets."""
from __future__ import annotations

from typing import Callable

from .errors import SplitError
from .text import longest_valid_prefix

PrefixRule = Callable[[str], tuple[int, int]]


def split(text: str, rule: PrefixRule = longest_valid_prefix) -> list[str]:
    """Greedy split: each segment is the longest valid prefix of what is left.

    Joining the segments gives back `text` exactly. Empty text gives no
    segments at all.
    """
    segments: list[str] = []
    remaining = text

    while remaining:
        start, end = rule(remaining)
        if start != 0 or end < start:
            raise SplitError(remaining, (start, end))
        segments.append(remaining[: end + 1])
        remaining = remaining[end + 1:]

    return segments
