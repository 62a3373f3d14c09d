"""Compute collision-free identifier remappings for a relocated subtree.

The moved node and every descendant get a new identifier. Descendants keep
their ascending order regardless of display direction and are renumbered
from the start of their sibling sequence (``1``/``a`` by alternation),
skipping identifiers that are taken outside the moved subtree. The subtree's
own identifiers never count as collisions because they are all being replaced.
"""

from loguru import logger

from zettel_index.config import MAX_REMAP_ATTEMPTS
from zettel_index.core.ids.increment import increment_segment
from zettel_index.core.ids.parser import make_segment, parse_identifier
from zettel_index.core.tree.allocator import first_child_segment
from zettel_index.models.node import (
    Identifier,
    IdentifierKey,
    Remap,
    RemapFailure,
    RemapFailureReason,
    ZettelNode,
    ZettelTree,
)


class _Collisions:
    """Existing identifiers minus the ones being replaced."""

    def __init__(self, tree: ZettelTree, source: ZettelNode) -> None:
        self.existing = tree.existing_keys
        self.exempt: frozenset[IdentifierKey] = frozenset(
            n.identifier.key for n in source.walk()
        )

    def __contains__(self, identifier: Identifier) -> bool:
        key = identifier.key
        return key in self.existing and key not in self.exempt


def _remap_children(
    node: ZettelNode,
    new_parent: Identifier,
    collisions: _Collisions,
    remap: Remap,
) -> None:
    candidate = first_child_segment(new_parent)
    for child in sorted(node.children, key=lambda c: c.identifier.key):
        new_id = new_parent.child(make_segment(candidate))
        while new_id in collisions:
            candidate = increment_segment(candidate)
            new_id = new_parent.child(make_segment(candidate))
        remap[child.id] = new_id.text
        _remap_children(child, new_id, collisions, remap)
        candidate = increment_segment(candidate)


def _remap_subtree(
    source: ZettelNode, new_root: Identifier, collisions: _Collisions
) -> Remap:
    remap: Remap = {source.id: new_root.text}
    _remap_children(source, new_root, collisions, remap)
    return remap


def remap_under_parent(
    tree: ZettelTree,
    source: ZettelNode,
    target_parent_id: str | None,
    *,
    max_attempts: int = MAX_REMAP_ATTEMPTS,
) -> Remap | RemapFailure:
    """Remap ``source`` and its descendants to sit under ``target_parent_id``.

    The caller must already have rejected a target equal to the source or
    below it.

    Args:
        tree: Current snapshot; a stale tree may miss collisions.
        source: Node to relocate.
        target_parent_id: New parent identifier, or None for the top level.
        max_attempts: How many root candidates to try before giving up.

    Returns:
        Mapping of every old identifier in the subtree to its new one, or a
        RemapFailure with reason EXHAUSTED when no free slot was found.
    """
    parent = parse_identifier(target_parent_id)
    existing_parent = tree.get(parent)
    if existing_parent is not None:
        parent = existing_parent.identifier
    collisions = _Collisions(tree, source)
    candidate = first_child_segment(parent)

    for attempt in range(1, max_attempts + 1):
        new_root = parent.child(make_segment(candidate))
        if new_root not in collisions:
            remap = _remap_subtree(source, new_root, collisions)
            logger.debug(
                "Remapped {} -> {} ({} identifiers, attempt {})",
                source.id, new_root.text, len(remap), attempt,
            )
            return remap
        candidate = increment_segment(candidate)

    logger.warning(
        "No free identifier under {!r} for {} after {} attempts",
        parent.text, source.id, max_attempts,
    )
    return RemapFailure(
        reason=RemapFailureReason.EXHAUSTED,
        message=(
            f"No free identifier under '{parent.text or '(top level)'}' "
            f"after {max_attempts} attempts"
        ),
        attempts=max_attempts,
    )


def remap_to_explicit_id(
    tree: ZettelTree, source: ZettelNode, desired_root_id: str
) -> Remap | RemapFailure:
    """Remap ``source`` to ``desired_root_id`` and renumber its descendants below it.

    Fails at once, without probing alternatives, when the desired identifier is
    taken outside the moved subtree.
    """
    new_root = parse_identifier(desired_root_id)
    if new_root.is_empty():
        return RemapFailure(
            reason=RemapFailureReason.INVALID_IDENTIFIER,
            message=f"'{desired_root_id}' is not a usable identifier",
        )

    collisions = _Collisions(tree, source)
    if new_root in collisions:
        return RemapFailure(
            reason=RemapFailureReason.COLLISION,
            message=f"Identifier '{new_root.text}' is already in use",
            attempts=1,
        )
    return _remap_subtree(source, new_root, collisions)
