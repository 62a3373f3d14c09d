"""Luhmann-style hierarchical identifiers for a collection of notes."""

from zettel_index.core.ids.increment import increment_segment
from zettel_index.core.ids.parser import compare_identifiers, parse_identifier
from zettel_index.core.snapshot import TreeCache
from zettel_index.core.tree.allocator import next_child, next_root
from zettel_index.core.tree.builder import build_tree
from zettel_index.core.tree.remap import remap_to_explicit_id, remap_under_parent
from zettel_index.models.node import Identifier, RemapFailure, ZettelNode, ZettelTree
from zettel_index.protocols import DocumentStoreProtocol

__all__ = [
    "DocumentStoreProtocol",
    "Identifier",
    "RemapFailure",
    "TreeCache",
    "ZettelNode",
    "ZettelTree",
    "build_tree",
    "compare_identifiers",
    "increment_segment",
    "next_child",
    "next_root",
    "parse_identifier",
    "remap_to_explicit_id",
    "remap_under_parent",
]
