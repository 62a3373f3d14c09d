"""Allocate the next free child or root identifier."""

from zettel_index.core.ids.increment import increment_segment
from zettel_index.core.ids.parser import make_segment
from zettel_index.models.node import Identifier, ZettelNode, ZettelTree


def first_child_segment(parent: Identifier) -> str:
    """Alternation rule: letters under a number, numbers under letters or the root."""
    last = parent.last
    if last is not None and last.is_numeric:
        return "a"
    return "1"


def next_child(parent: ZettelNode) -> Identifier:
    """Return the first identifier under ``parent`` not already used by a child."""
    taken = {c.identifier.key for c in parent.children}
    candidate = first_child_segment(parent.identifier)
    while True:
        identifier = parent.identifier.child(make_segment(candidate))
        if identifier.key not in taken:
            return identifier
        candidate = increment_segment(candidate)


def next_root(tree: ZettelTree) -> Identifier:
    """Return the smallest free positive integer among top-level identifiers."""
    used = {node.segments[0].key for node in tree.root.children}
    candidate = "1"
    while make_segment(candidate).key in used:
        candidate = increment_segment(candidate)
    return Identifier((make_segment(candidate),))
