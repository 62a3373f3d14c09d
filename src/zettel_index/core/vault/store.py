"""Markdown vault: notes whose identifier lives in YAML front matter."""

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path

import frontmatter
import yaml
from loguru import logger

from zettel_index.config import DEFAULT_ID_PROPERTY, DEFAULT_NOTE_PREFIX

_UNSAFE_NAME_RE = re.compile(r'[\\/:*?"<>|]')


@dataclass(frozen=True)
class VaultNote:
    """A markdown note in the vault."""

    path: Path
    rel_path: str

    @property
    def title(self) -> str:
        return self.path.stem


def _normalise(raw: str) -> str:
    return raw.strip().replace("\\", "/")


class PathFilter:
    """Include/exclude rules on vault-relative paths, case-insensitive.

    An exclude entry ending in ``.md`` excludes that one file; any other entry
    excludes everything below that folder. Include entries are folders; with
    no include entries every path is included.
    """

    def __init__(
        self,
        *,
        exclude: Iterable[str] = (),
        include: Iterable[str] = (),
    ) -> None:
        self._excluded_files: set[str] = set()
        self._excluded_folders: list[str] = []
        for raw in exclude:
            entry = _normalise(raw)
            if not entry:
                continue
            if entry.lower().endswith(".md"):
                self._excluded_files.add(entry.lower())
            else:
                self._excluded_folders.append(entry.rstrip("/").lower() + "/")
        self._included_folders = [
            _normalise(raw).rstrip("/").lower() + "/" for raw in include if _normalise(raw)
        ]

    def accepts(self, rel_path: str) -> bool:
        lower = rel_path.lower()
        if self._included_folders and not any(
            lower.startswith(prefix) for prefix in self._included_folders
        ):
            return False
        if lower in self._excluded_files:
            return False
        return not any(lower.startswith(prefix) for prefix in self._excluded_folders)


class MarkdownVault:
    """Document store over a directory of markdown notes."""

    def __init__(
        self,
        root: str | Path,
        *,
        id_property: str = DEFAULT_ID_PROPERTY,
        path_filter: PathFilter | None = None,
    ) -> None:
        self.root = Path(root).resolve()
        if not self.root.is_dir():
            msg = f"Vault directory {str(self.root)!r} not found"
            raise ValueError(msg)
        self.id_property = id_property
        self.path_filter = path_filter or PathFilter()
        logger.debug("Vault ready: {} (property {!r})", self.root, id_property)

    def notes(self) -> list[VaultNote]:
        """All accepted markdown notes, ordered by relative path."""
        out = []
        for path in sorted(self.root.rglob("*.md")):
            rel_path = path.relative_to(self.root).as_posix()
            if rel_path.startswith(".") or "/." in rel_path:
                continue
            if self.path_filter.accepts(rel_path):
                out.append(VaultNote(path=path, rel_path=rel_path))
        return out

    def read_identifier(self, note: VaultNote) -> str | None:
        """Return the note's identifier, or None if absent or unreadable."""
        try:
            post = frontmatter.load(str(note.path))
        except (yaml.YAMLError, UnicodeDecodeError):
            logger.warning("Skipping front matter of {}: cannot parse", note.rel_path)
            return None
        value = post.metadata.get(self.id_property)
        if isinstance(value, bool):
            return None
        if isinstance(value, int):
            return str(value)
        if isinstance(value, str) and value.strip():
            return value.strip()
        return None

    def entries(self) -> Sequence[tuple[str | None, VaultNote]]:
        return [(self.read_identifier(note), note) for note in self.notes()]

    def unfiled(self) -> list[VaultNote]:
        """Notes without an identifier, sorted by name."""
        missing = [note for ident, note in self.entries() if ident is None]
        return sorted(missing, key=lambda n: n.title.lower())

    def find_note(self, rel_path: str) -> VaultNote | None:
        """Look up a note by vault-relative path; None if missing or filtered out."""
        path = (self.root / rel_path).resolve()
        if not path.is_file() or not path.is_relative_to(self.root):
            return None
        normalised = path.relative_to(self.root).as_posix()
        if not self.path_filter.accepts(normalised):
            return None
        return VaultNote(path=path, rel_path=normalised)

    def write_identifier(self, document: VaultNote, identifier: str) -> None:
        """Set the identifier property, keeping the body and other metadata."""
        post = frontmatter.load(str(document.path))
        post[self.id_property] = identifier
        document.path.write_text(frontmatter.dumps(post) + "\n", encoding="utf-8")
        logger.debug("Set {}={!r} on {}", self.id_property, identifier, document.rel_path)

    def _unique_path(self, folder: Path, base: str) -> Path:
        """Append `` (n)`` to ``base`` until no file of that name exists."""
        candidate = folder / f"{base}.md"
        counter = 1
        while candidate.exists():
            candidate = folder / f"{base} ({counter}).md"
            counter += 1
        return candidate

    def create_note(
        self,
        identifier: str,
        *,
        folder: Path | None = None,
        title: str | None = None,
    ) -> VaultNote:
        """Create an empty note whose front matter holds only ``identifier``."""
        target_dir = (self.root / folder).resolve() if folder else self.root
        if not target_dir.is_relative_to(self.root):
            msg = f"Folder escapes vault: {str(folder)!r}"
            raise ValueError(msg)
        target_dir.mkdir(parents=True, exist_ok=True)

        base = _UNSAFE_NAME_RE.sub("-", title or f"{DEFAULT_NOTE_PREFIX} {identifier}")
        path = self._unique_path(target_dir, base)
        post = frontmatter.Post("", **{self.id_property: identifier})
        path.write_text(frontmatter.dumps(post) + "\n", encoding="utf-8")
        logger.info("Created {}", path.relative_to(self.root).as_posix())
        return VaultNote(path=path, rel_path=path.relative_to(self.root).as_posix())
