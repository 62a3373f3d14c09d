"""Render Zettel trees as markdown."""

import io
from collections.abc import Callable, Collection
from typing import Any

from zettel_index.core.tree.navigation import find_node
from zettel_index.models.node import ZettelNode, ZettelTree


def _default_label(document: Any) -> str:
    title = getattr(document, "title", None)
    return title if isinstance(title, str) else str(document)


def render_tree_as_markdown(
    tree: ZettelTree,
    *,
    below: str | None = None,
    max_depth: int | None = None,
    collapsed: Collection[str] = (),
    label: Callable[[Any], str] = _default_label,
) -> str:
    """Render the hierarchy (or one subtree) as an indented bullet list.

    Args:
        tree: Tree snapshot to render.
        below: Identifier of the subtree root to start from (None = whole tree).
        max_depth: Max levels below the start to include (None = unlimited).
        collapsed: Identifiers whose children are hidden.
        label: Turns a document handle into display text.

    Returns:
        Markdown string, or an empty string when ``below`` does not exist.
    """
    if below:
        start = find_node(tree, below)
        if start is None:
            return ""
        top: tuple[ZettelNode, ...] = (start,)
    else:
        top = tree.root.children

    out = io.StringIO()

    def write_node(node: ZettelNode, depth: int) -> None:
        indent = "    " * depth
        if node.documents:
            for document in node.documents:
                out.write(f"{indent}- {node.id}: {label(document)}\n")
        else:
            out.write(f"{indent}- {node.id}\n")

        if not node.children:
            return
        # Truncation indicator when children are cut off by depth or collapse
        if node.id in collapsed or (max_depth is not None and depth >= max_depth):
            count = len(node.children)
            noun = "child" if count == 1 else "children"
            out.write(f"{indent}    - ... ({count} more {noun}, id={node.id})\n")
            return
        for child in node.children:
            write_node(child, depth + 1)

    for node in top:
        write_node(node, 0)
    return out.getvalue()
