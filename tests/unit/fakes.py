"""Fake implementations for testing the reorganisation workflows."""

from pathlib import Path
from typing import Any


class FakeStore:
    """In-memory fake for MarkdownVault.

    Documents are plain names; identifier writes are recorded for assertions.
    """

    def __init__(self, entries: list[tuple[str | None, str]] | None = None) -> None:
        self.ids: dict[str, str | None] = dict((doc, ident) for ident, doc in entries or [])
        self.writes: list[tuple[str, str]] = []
        self.fail_after: int | None = None

    def entries(self) -> list[tuple[str | None, str]]:
        """Return (identifier, document) pairs in insertion order."""
        return [(ident, doc) for doc, ident in self.ids.items()]

    def write_identifier(self, document: Any, identifier: str) -> None:
        """Record the write, or raise once ``fail_after`` writes have happened."""
        if self.fail_after is not None and len(self.writes) >= self.fail_after:
            msg = f"disk full while writing {document}"
            raise OSError(msg)
        self.ids[document] = identifier
        self.writes.append((document, identifier))

    def create_note(
        self,
        identifier: str,
        *,
        folder: Path | None = None,
        title: str | None = None,
    ) -> str:
        """Add a document named after its identifier."""
        name = title or f"zettel {identifier}"
        self.ids[name] = identifier
        return name
