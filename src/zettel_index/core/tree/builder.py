"""Build an immutable Zettel tree from (identifier, document) entries."""

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from loguru import logger

from zettel_index.core.ids.parser import identifier_sort_key, parse_identifier
from zettel_index.models.node import Identifier, IdentifierKey, ZettelNode, ZettelTree

Entry = tuple[str | None, Any]


@dataclass
class _DraftNode:
    identifier: Identifier
    children: dict[IdentifierKey, "_DraftNode"] = field(default_factory=dict)
    documents: list[Any] = field(default_factory=list)


def _insert(root: _DraftNode, identifier: Identifier, document: Any) -> None:
    node = root
    prefix = Identifier()
    for segment in identifier.segments:
        prefix = prefix.child(segment)
        child = node.children.get(prefix.key)
        if child is None:
            # First spelling seen for a prefix becomes the node's id.
            child = _DraftNode(identifier=prefix)
            node.children[prefix.key] = child
        node = child
    node.documents.append(document)


def _freeze(
    draft: _DraftNode,
    index: dict[IdentifierKey, ZettelNode],
    *,
    descending: bool,
) -> ZettelNode:
    ordered = sorted(
        draft.children.values(),
        key=lambda c: identifier_sort_key(c.identifier),
        reverse=descending,
    )
    node = ZettelNode(
        identifier=draft.identifier,
        children=tuple(_freeze(c, index, descending=descending) for c in ordered),
        documents=tuple(draft.documents),
    )
    if not node.is_root:
        index[node.identifier.key] = node
    return node


def build_tree(entries: Iterable[Entry], *, descending: bool = False) -> ZettelTree:
    """Build the hierarchy from collaborator entries.

    Every prefix of every supplied identifier becomes a node. Entries with no
    identifier are skipped; they belong to the unfiled collection. Duplicate
    identifiers are kept side by side on the same node.

    Args:
        entries: ``(identifier text or None, document handle)`` pairs.
        descending: Sort siblings in descending instead of ascending order.

    Returns:
        The tree snapshot with its identifier index.
    """
    root = _DraftNode(identifier=Identifier())
    filed = 0
    unfiled = 0
    for raw_id, document in entries:
        identifier = parse_identifier(raw_id)
        if identifier.is_empty():
            unfiled += 1
            continue
        _insert(root, identifier, document)
        filed += 1

    index: dict[IdentifierKey, ZettelNode] = {}
    frozen_root = _freeze(root, index, descending=descending)
    logger.debug(
        "Built tree: {} nodes from {} documents ({} without identifier)",
        len(index), filed, unfiled,
    )
    return ZettelTree(root=frozen_root, index=index, descending=descending)
