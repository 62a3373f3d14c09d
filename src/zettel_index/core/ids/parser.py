"""Parse Zettel identifiers and order them.

Parsing is tolerant: surrounding whitespace is stripped, empty pieces from
leading, trailing or doubled dots are dropped, and any piece that is not all
decimal digits is alphabetic. ``"1a"`` is therefore one alphabetic segment,
not ``1`` followed by ``a``.
"""

import re

from zettel_index.models.node import SEPARATOR, Identifier, IdentifierKey, Segment, SegmentKind

_NUMERIC_RE = re.compile(r"[0-9]+")


def classify_segment(text: str) -> SegmentKind:
    """Return NUMERIC for an all-digit token, ALPHABETIC for anything else."""
    if _NUMERIC_RE.fullmatch(text):
        return SegmentKind.NUMERIC
    return SegmentKind.ALPHABETIC


def make_segment(text: str) -> Segment:
    return Segment(text=text, kind=classify_segment(text))


def parse_identifier(text: str | None) -> Identifier:
    """Split an identifier string into segments.

    Never raises; ``None`` or blank input yields the empty identifier.

    Examples:
        >>> parse_identifier(" 1.a. 2 ").text
        '1.a.2'
        >>> parse_identifier("..").is_empty()
        True
    """
    if not text:
        return Identifier()
    pieces = (p.strip() for p in text.strip().split(SEPARATOR))
    return Identifier(tuple(make_segment(p) for p in pieces if p))


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


def compare_segments(a: Segment, b: Segment) -> int:
    """Compare two segments: -1, 0 or 1.

    Numbers compare by value, letters case-insensitively, and a numeric
    segment always sorts before an alphabetic one.
    """
    if a.is_numeric and b.is_numeric:
        left_key, right_key = a.key, b.key
        return (left_key > right_key) - (left_key < right_key)
    if not a.is_numeric and not b.is_numeric:
        left, right = a.text.lower(), b.text.lower()
        return (left > right) - (left < right)
    return -1 if a.is_numeric else 1


def compare_identifiers(a: Identifier, b: Identifier) -> int:
    """Lexicographic comparison over segments; a strict prefix sorts first."""
    for left, right in zip(a.segments, b.segments):
        result = compare_segments(left, right)
        if result:
            return result
    return _sign(a.depth - b.depth)


def identifier_sort_key(identifier: Identifier) -> IdentifierKey:
    """Sort key consistent with ``compare_identifiers``.

    Examples:
        >>> ids = [parse_identifier(t) for t in ["1.b", "10", "1", "a", "1.a", "9"]]
        >>> [i.text for i in sorted(ids, key=identifier_sort_key)]
        ['1', '1.a', '1.b', '9', '10', 'a']
    """
    return identifier.key
