"""Twitter weighted-length rules.

Twitter does not count characters one for one: most Latin, punctuation and
general-purpose code points weigh 1, everything else (CJK, ...) weighs 2, an
emoji weighs 2 however many code points it is built from, and every URL
weighs a fixed 23 once shortened to t.co. Text is measured after NFC
normalization. A tweet is valid when its weighted length is between 1 and 280.

Text is measured in units: a URL, or one grapheme cluster. Units are never
split, so a split point never falls inside a link or an emoji sequence.
"""
from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass
from typing import Iterator

import grapheme

MAX_WEIGHTED_LENGTH = 280
SCALE = 100
DEFAULT_WEIGHT = 200
TRANSFORMED_URL_LENGTH = 23

# (start, end, weight), inclusive code point ranges
WEIGHTED_RANGES = (
    (0, 4351, 100),
    (8192, 8205, 100),
    (8208, 8223, 100),
    (8242, 8247, 100),
)

INVALID_CHARACTERS = frozenset("\ufffe\ufeff\uffff")

# Pictographs, symbols, dingbats, regional indicators
EMOJI_RANGES = (
    (0x1F000, 0x1FAFF),
    (0x2300, 0x23FF),
    (0x2600, 0x27BF),
    (0x2B00, 0x2BFF),
)
# VS16, ZWJ, combining keycap, skin tones
EMOJI_JOINERS = frozenset("\ufe0f\u200d\u20e3\U0001f3fb\U0001f3fc\U0001f3fd\U0001f3fe\U0001f3ff")

# Domains linked without a scheme. Any two-letter TLD is taken as a ccTLD.
GENERIC_TLDS = frozenset("""
    aero app art asia biz blog cat cloud club com coop design dev edu email gov
    info int io jobs live me mil mobi museum name net news online org page pro
    shop site space store tech tel travel xxx xyz
""".split())
# ccTLDs linked even as a bare `name.tld` with no path
SPECIAL_CCTLDS = frozenset({"co", "tv"})

_URL_RE = re.compile(r'https?://[^\s<>"\'\u200b]+')
_DOMAIN_RE = re.compile(
    r"(?<![A-Za-z0-9@$#_./-])"
    r"((?:[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?\.)+)"
    r"([A-Za-z]{2,63})"
    r"(?![A-Za-z0-9@_-])"
    r"((?::\d{1,5})?(?:/[^\s<>\"'\u200b]*)?)"
)
_URL_TRAILING = ".,;:!?)]}'\""


@dataclass(frozen=True)
class ParsedTweet:
    """Result of measuring a text against the tweet length rules.

    valid_range_start/valid_range_end delimit (inclusive) the longest leading
    slice of the text that would still be a valid tweet; for empty text the
    range is (0, -1).
    """

    weighted_length: int
    valid: bool
    valid_range_start: int
    valid_range_end: int


def char_weight(ch: str) -> int:
    """Scaled weight of a single code point."""
    cp = ord(ch)
    for start, end, weight in WEIGHTED_RANGES:
        if start <= cp <= end:
            return weight
    return DEFAULT_WEIGHT


def is_emoji(cluster: str) -> bool:
    for ch in cluster:
        cp = ord(ch)
        if any(start <= cp <= end for start, end in EMOJI_RANGES):
            return True
    return len(cluster) > 1 and any(ch in EMOJI_JOINERS for ch in cluster)


def cluster_weight(cluster: str) -> int:
    """Scaled weight of one grapheme cluster."""
    if is_emoji(cluster):
        return DEFAULT_WEIGHT
    return sum(char_weight(ch) for ch in unicodedata.normalize("NFC", cluster))


def _domain_is_linked(labels: str, tld: str, path: str) -> bool:
    tld = tld.lower()
    if len(tld) == 2:
        # bare `name.cc` is only a link for t.co-style special ccTLDs
        return bool(path) or labels.count(".") > 1 or tld in SPECIAL_CCTLDS
    return tld in GENERIC_TLDS


def url_spans(text: str) -> dict[int, int]:
    """Map each URL start offset to its end offset (exclusive)."""
    spans = {}
    for match in _URL_RE.finditer(text):
        url = match.group(0).rstrip(_URL_TRAILING)
        if len(url) > len("https://"):
            spans[match.start()] = match.start() + len(url)

    for match in _DOMAIN_RE.finditer(text):
        labels, tld, path = match.groups()
        path = path.rstrip(_URL_TRAILING)
        if not _domain_is_linked(labels, tld, path):
            continue
        start = match.start()
        end = match.start(3) + len(path)
        if any(s < end and start < e for s, e in spans.items()):
            continue
        spans[start] = end
    return spans


def text_units(text: str) -> Iterator[tuple[int, int, int]]:
    """Yield (start, end, scaled weight) for each URL or grapheme cluster."""
    pos = 0
    for start, end in sorted(url_spans(text).items()):
        yield from _cluster_units(text, pos, start)
        yield start, end, TRANSFORMED_URL_LENGTH * SCALE
        pos = end
    yield from _cluster_units(text, pos, len(text))


def _cluster_units(text: str, start: int, end: int) -> Iterator[tuple[int, int, int]]:
    offset = start
    for cluster in grapheme.graphemes(text[start:end]):
        yield offset, offset + len(cluster), cluster_weight(cluster)
        offset += len(cluster)


def parse_tweet(text: str) -> ParsedTweet:
    """Measure text: weighted length, validity and longest valid prefix."""
    limit = MAX_WEIGHTED_LENGTH * SCALE

    weighted = 0
    valid_end = -1
    overflowed = False
    for _, end, weight in text_units(text):
        weighted += weight
        if not overflowed and weighted <= limit:
            valid_end = end - 1
        else:
            overflowed = True

    weighted_length = weighted // SCALE
    has_invalid = any(ch in INVALID_CHARACTERS for ch in text)
    valid = 0 < weighted_length <= MAX_WEIGHTED_LENGTH and not has_invalid
    return ParsedTweet(
        weighted_length=weighted_length,
        valid=valid,
        valid_range_start=0,
        valid_range_end=valid_end,
    )


def longest_valid_prefix(text: str) -> tuple[int, int]:
    """Inclusive (start, end) range of the longest valid leading slice."""
    parsed = parse_tweet(text)
    return parsed.valid_range_start, parsed.valid_range_end


def weighted_length(text: str) -> int:
    return parse_tweet(text).weighted_length
