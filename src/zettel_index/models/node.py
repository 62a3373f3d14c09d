"""Domain models for the Zettel identifier hierarchy."""

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

SEPARATOR = "."


class SegmentKind(Enum):
    """Kind of a single identifier segment."""

    NUMERIC = "numeric"
    ALPHABETIC = "alphabetic"


@dataclass(frozen=True)
class Segment:
    """One dot-delimited component of an identifier.

    The text is kept verbatim (case, leading zeros); ``key`` is the form used
    for ordering and equality.
    """

    text: str
    kind: SegmentKind

    @property
    def is_numeric(self) -> bool:
        return self.kind is SegmentKind.NUMERIC

    @property
    def key(self) -> tuple[int, int, str]:
        if self.is_numeric:
            # Digit strings of any width: shorter magnitude first, then by digits.
            digits = self.text.lstrip("0")
            return (0, len(digits), digits)
        return (1, 0, self.text.lower())


@dataclass(frozen=True, eq=False)
class Identifier:
    """An ordered sequence of segments, rendered joined with dots.

    Equality and hashing ignore case of alphabetic segments and compare
    numeric segments by value, so ``1.A`` equals ``01.a``.
    """

    segments: tuple[Segment, ...] = ()

    @property
    def text(self) -> str:
        return SEPARATOR.join(s.text for s in self.segments)

    @property
    def key(self) -> tuple[tuple[int, int, str], ...]:
        return tuple(s.key for s in self.segments)

    @property
    def last(self) -> Segment | None:
        return self.segments[-1] if self.segments else None

    @property
    def depth(self) -> int:
        return len(self.segments)

    def is_empty(self) -> bool:
        return not self.segments

    def child(self, segment: Segment) -> "Identifier":
        """Return this identifier extended by one trailing segment."""
        return Identifier((*self.segments, segment))

    def parent(self) -> "Identifier":
        return Identifier(self.segments[:-1])

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Identifier):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)

    def __str__(self) -> str:
        return self.text


IdentifierKey = tuple[tuple[int, int, str], ...]

# Old identifier text -> new identifier text.
Remap = dict[str, str]


@dataclass(frozen=True)
class ZettelNode:
    """A single identifier prefix in the hierarchy.

    ``children`` holds the display order; ``documents`` keeps every handle
    assigned exactly this identifier, in enumeration order.
    """

    identifier: Identifier
    children: tuple["ZettelNode", ...] = ()
    documents: tuple[Any, ...] = ()

    @property
    def id(self) -> str:
        return self.identifier.text

    @property
    def segments(self) -> tuple[Segment, ...]:
        return self.identifier.segments

    @property
    def is_root(self) -> bool:
        return self.identifier.is_empty()

    def has_child(self, identifier: Identifier) -> bool:
        return any(c.identifier == identifier for c in self.children)

    def walk(self) -> Iterator["ZettelNode"]:
        """Yield this node and all descendants in display order (pre-order)."""
        yield self
        for child in self.children:
            yield from child.walk()


@dataclass(frozen=True)
class ZettelTree:
    """Immutable snapshot of the hierarchy built from collaborator entries."""

    root: ZettelNode
    index: dict[IdentifierKey, ZettelNode] = field(default_factory=dict)
    descending: bool = False

    @property
    def existing_keys(self) -> frozenset[IdentifierKey]:
        return frozenset(self.index)

    def contains(self, identifier: Identifier) -> bool:
        return identifier.key in self.index

    def get(self, identifier: Identifier) -> ZettelNode | None:
        return self.index.get(identifier.key)

    def iter_nodes(self) -> Iterator[ZettelNode]:
        """Yield every non-root node in display order."""
        for child in self.root.children:
            yield from child.walk()

    def __len__(self) -> int:
        return len(self.index)


class RemapFailureReason(Enum):
    """Why a subtree remapping could not be produced."""

    COLLISION = "collision"
    EXHAUSTED = "exhausted"
    INVALID_IDENTIFIER = "invalid_identifier"


@dataclass(frozen=True)
class RemapFailure:
    """A definitive failure to compute a remapping; never a partial result."""

    reason: RemapFailureReason
    message: str
    attempts: int = 0
