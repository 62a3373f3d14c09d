"""Reorganisation workflows: move, renumber, create and re-identify notes.

Every operation works on a freshly validated snapshot, writes through the
document store, then invalidates the cache so the next read rebuilds.
"""

from pathlib import Path
from typing import Any

from loguru import logger

from zettel_index.core.ids.parser import parse_identifier
from zettel_index.core.snapshot import TreeCache
from zettel_index.core.tree.allocator import next_child, next_root
from zettel_index.core.tree.navigation import find_node, is_same_or_descendant, validate_move
from zettel_index.core.tree.remap import remap_to_explicit_id, remap_under_parent
from zettel_index.models.node import Remap, RemapFailure, ZettelTree
from zettel_index.protocols import DocumentStoreProtocol


class PartialWriteError(RuntimeError):
    """A store write failed part-way through applying a remapping."""

    def __init__(self, written: int, cause: OSError) -> None:
        super().__init__(f"Write failed after {written} documents: {cause}")
        self.written = written


def apply_remap(tree: ZettelTree, store: DocumentStoreProtocol, remap: Remap) -> int:
    """Write each remapped identifier to every document holding the old one.

    Path nodes without documents need no write. Nothing is rolled back when
    a write fails.

    Returns:
        Number of documents written.

    Raises:
        PartialWriteError: The store raised ``OSError`` on some document.
    """
    written = 0
    for old_id, new_id in remap.items():
        node = find_node(tree, old_id)
        if node is None:
            continue
        for document in node.documents:
            try:
                store.write_identifier(document, new_id)
            except OSError as e:
                raise PartialWriteError(written, e) from e
            written += 1
    return written


def _commit(
    cache: TreeCache,
    store: DocumentStoreProtocol,
    tree: ZettelTree,
    remap: Remap,
    *,
    dry_run: bool,
) -> dict[str, Any]:
    if dry_run:
        return {"success": True, "dry_run": True, "remap": remap, "updated": 0}

    try:
        written = apply_remap(tree, store, remap)
    except PartialWriteError as e:
        logger.exception("Renumbering stopped after {} documents", e.written)
        return {"success": False, "error": str(e), "remap": remap, "updated": e.written}
    finally:
        cache.invalidate("identifiers renumbered")

    logger.info("Renumbered {} identifiers ({} documents)", len(remap), written)
    return {"success": True, "remap": remap, "updated": written}


def _failure(result: RemapFailure) -> dict[str, Any]:
    return {"success": False, "error": result.message, "reason": result.reason.value}


def move_node(
    cache: TreeCache,
    store: DocumentStoreProtocol,
    *,
    source_id: str,
    target_parent_id: str | None,
    dry_run: bool = False,
) -> dict[str, Any]:
    """Move a node and its subtree under a new parent.

    Args:
        cache: Tree cache for the store's documents.
        store: Document store that receives the identifier writes.
        source_id: Identifier of the node to move.
        target_parent_id: New parent identifier (None or "" for the top level).
        dry_run: Compute the remapping without writing.
    """
    tree = cache.current()
    error = validate_move(tree, source_id, target_parent_id)
    if error:
        return {"success": False, "error": error}

    source = find_node(tree, source_id)
    if source is None:
        return {"success": False, "error": f"Node '{source_id}' not found."}
    result = remap_under_parent(tree, source, target_parent_id or None)
    if isinstance(result, RemapFailure):
        return _failure(result)
    return _commit(cache, store, tree, result, dry_run=dry_run)


def renumber_node(
    cache: TreeCache,
    store: DocumentStoreProtocol,
    *,
    source_id: str,
    new_id: str,
    dry_run: bool = False,
) -> dict[str, Any]:
    """Give a node an explicit new identifier, renumbering its subtree below it."""
    tree = cache.current()
    source = find_node(tree, source_id)
    if source is None:
        return {"success": False, "error": f"Node '{source_id}' not found."}

    desired = parse_identifier(new_id)
    if desired != source.identifier and is_same_or_descendant(source.identifier, desired):
        return {
            "success": False,
            "error": "Cannot renumber a node into its own subtree.",
        }

    result = remap_to_explicit_id(tree, source, new_id)
    if isinstance(result, RemapFailure):
        return _failure(result)
    return _commit(cache, store, tree, result, dry_run=dry_run)


def create_child_note(
    cache: TreeCache,
    store: DocumentStoreProtocol,
    *,
    parent_id: str,
    folder: Path | None = None,
) -> dict[str, Any]:
    """Create a note with the next free identifier under ``parent_id``."""
    tree = cache.current()
    parent = find_node(tree, parent_id)
    if parent is None:
        return {"success": False, "error": f"Node '{parent_id}' not found."}

    identifier = next_child(parent).text
    note = store.create_note(identifier, folder=folder)
    cache.invalidate("note created")
    return {"success": True, "identifier": identifier, "note": note}


def create_root_note(
    cache: TreeCache,
    store: DocumentStoreProtocol,
    *,
    folder: Path | None = None,
) -> dict[str, Any]:
    """Create a note with the smallest free top-level identifier."""
    identifier = next_root(cache.current()).text
    note = store.create_note(identifier, folder=folder)
    cache.invalidate("note created")
    return {"success": True, "identifier": identifier, "note": note}


def set_identifier(
    cache: TreeCache,
    store: DocumentStoreProtocol,
    *,
    document: Any,
    identifier: str,
) -> dict[str, Any]:
    """Overwrite one document's identifier without touching any other note."""
    parsed = parse_identifier(identifier)
    if parsed.is_empty():
        return {"success": False, "error": f"'{identifier}' is not a usable identifier"}
    try:
        store.write_identifier(document, parsed.text)
    except OSError as e:
        return {"success": False, "error": f"Write failed: {e}"}
    finally:
        cache.invalidate("identifier edited")
    return {"success": True, "identifier": parsed.text}
