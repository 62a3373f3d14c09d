"""Produce the next segment of the same kind."""

from zettel_index.core.ids.parser import classify_segment
from zettel_index.models.node import SegmentKind

_ALPHABET = "abcdefghijklmnopqrstuvwxyz"


def _increment_letters(text: str) -> str:
    """Add one to a base-26 letter numeral, spreadsheet-column style.

    Characters outside ``a..z`` stay where they are and the carry moves past
    them. An overflowing carry prepends a new ``a``.
    """
    chars = list(text.lower())
    for pos in range(len(chars) - 1, -1, -1):
        char = chars[pos]
        if char not in _ALPHABET:
            continue
        if char != "z":
            chars[pos] = _ALPHABET[_ALPHABET.index(char) + 1]
            return "".join(chars)
        chars[pos] = "a"
    if not any(c in _ALPHABET for c in chars):
        return "".join(chars) + "a"
    return "a" + "".join(chars)


def _increment_digits(text: str) -> str:
    """Add one to a decimal digit string of any width, dropping leading zeros."""
    digits = list(text.lstrip("0") or "0")
    for pos in range(len(digits) - 1, -1, -1):
        if digits[pos] != "9":
            digits[pos] = str(int(digits[pos]) + 1)
            return "".join(digits)
        digits[pos] = "0"
    return "1" + "".join(digits)


def increment_segment(segment: str) -> str:
    """Return the segment that follows ``segment``.

    Examples:
        >>> increment_segment("99")
        '100'
        >>> increment_segment("az")
        'ba'
        >>> increment_segment("Z")
        'AA'
    """
    if classify_segment(segment) is SegmentKind.NUMERIC:
        return _increment_digits(segment)
    out = _increment_letters(segment)
    return out.upper() if segment.isupper() else out
