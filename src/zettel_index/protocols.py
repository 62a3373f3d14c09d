"""Protocols for the document store behind the Zettel index."""

from collections.abc import Sequence
from pathlib import Path
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class DocumentStoreProtocol(Protocol):
    """Protocol for stores that own documents and their identifier field."""

    def entries(self) -> Sequence[tuple[str | None, Any]]:
        """Return (identifier or None, document handle) pairs in a stable order."""
        ...

    def write_identifier(self, document: Any, identifier: str) -> None:
        """Set a document's identifier field."""
        ...

    def create_note(
        self,
        identifier: str,
        *,
        folder: Path | None = None,
        title: str | None = None,
    ) -> Any:
        """Create a new document carrying ``identifier`` and return its handle."""
        ...
