"""Tree navigation: lookups, breadcrumbs, subtree listing, move checks."""

from zettel_index.core.ids.parser import parse_identifier
from zettel_index.models.node import Identifier, ZettelNode, ZettelTree


def find_node(tree: ZettelTree, identifier: str) -> ZettelNode | None:
    """Look up a node by identifier text (case and leading zeros ignored)."""
    parsed = parse_identifier(identifier)
    if parsed.is_empty():
        return None
    return tree.get(parsed)


def list_subtree_ids(node: ZettelNode) -> list[str]:
    """Return ids of ``node`` and all its descendants in display order."""
    return [n.id for n in node.walk()]


def is_same_or_descendant(ancestor: Identifier, candidate: Identifier) -> bool:
    """True when ``candidate`` equals ``ancestor`` or lies below it."""
    if candidate.depth < ancestor.depth:
        return False
    return candidate.key[: ancestor.depth] == ancestor.key


def get_breadcrumbs(tree: ZettelTree, identifier: str) -> tuple[ZettelNode, ...]:
    """Get ancestor nodes from the top level down to the immediate parent.

    The node itself is excluded. Unknown identifiers yield an empty tuple.
    """
    parsed = parse_identifier(identifier)
    crumbs: list[ZettelNode] = []
    for depth in range(1, parsed.depth):
        node = tree.get(Identifier(parsed.segments[:depth]))
        if node is not None:
            crumbs.append(node)
    return tuple(crumbs)


def nodes_with_children(tree: ZettelTree) -> list[str]:
    """Ids of every node that has at least one child."""
    return [n.id for n in tree.iter_nodes() if n.children]


def validate_move(
    tree: ZettelTree, source_id: str, target_parent_id: str | None
) -> str | None:
    """Check a move request before remapping.

    Returns:
        An error message, or None when the move is allowed. A target of
        None (or blank) means the top level.
    """
    source = find_node(tree, source_id)
    if source is None:
        return f"Node '{source_id}' not found."
    target = parse_identifier(target_parent_id)
    if target.is_empty():
        return None
    if not tree.contains(target):
        return f"Target '{target_parent_id}' not found."
    if is_same_or_descendant(source.identifier, target):
        return "Cannot move a node under itself or one of its descendants."
    return None
