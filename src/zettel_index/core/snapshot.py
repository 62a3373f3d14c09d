"""Owned, versioned tree snapshot with explicit invalidation."""

from collections.abc import Callable, Iterable

from loguru import logger

from zettel_index.core.tree.builder import Entry, build_tree
from zettel_index.models.node import ZettelTree


class TreeCache:
    """Holds the current tree and rebuilds it on demand.

    The tree is never patched in place: any change to the underlying
    documents marks the cache dirty and the next ``current()`` call rebuilds
    from the collaborator's entries.
    """

    def __init__(
        self,
        load_entries: Callable[[], Iterable[Entry]],
        *,
        descending: bool = False,
    ) -> None:
        self._load_entries = load_entries
        self._descending = descending
        self._tree: ZettelTree | None = None
        self._dirty = True
        self.version = 0

    @property
    def is_dirty(self) -> bool:
        return self._dirty

    @property
    def descending(self) -> bool:
        return self._descending

    def current(self) -> ZettelTree:
        """Return an up-to-date snapshot, rebuilding if anything changed."""
        if self._dirty or self._tree is None:
            self._tree = build_tree(self._load_entries(), descending=self._descending)
            self._dirty = False
            self.version += 1
            logger.debug("Tree snapshot v{} ({} nodes)", self.version, len(self._tree))
        return self._tree

    def invalidate(self, reason: str = "") -> None:
        """Mark the snapshot stale after documents or identifiers changed."""
        if reason:
            logger.debug("Tree invalidated: {}", reason)
        self._dirty = True

    def set_descending(self, descending: bool) -> None:
        if descending != self._descending:
            self._descending = descending
            self.invalidate("sort order changed")
