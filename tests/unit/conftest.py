"""Shared test fixtures."""

from pathlib import Path

import pytest

from tests.unit.fakes import FakeStore
from zettel_index.core.snapshot import TreeCache
from zettel_index.core.tree.builder import build_tree
from zettel_index.models.node import ZettelTree

SAMPLE_ENTRIES: list[tuple[str | None, str]] = [
    ("1", "Systems theory"),
    ("1.a", "Autopoiesis"),
    ("1.a.1", "Maturana"),
    ("1.b", "Communication"),
    ("2", "Slip box method"),
    ("2.a", "Index cards"),
    (None, "Inbox note"),
]

VAULT_NOTES = {
    "systems.md": '---\nzettel_id: "1"\n---\n\nSystems theory\n',
    "autopoiesis.md": "---\nzettel_id: 1.a\ntags: [biology]\n---\n\nAutopoiesis\n",
    "maturana.md": "---\nzettel_id: 1.a.1\n---\n\nMaturana\n",
    "cards/index-cards.md": "---\nzettel_id: 2.a\n---\n\nIndex cards\n",
    "inbox.md": "# Just an idea\n",
    "archive/old.md": "---\nzettel_id: 9\n---\n\nOld\n",
}


@pytest.fixture
def sample_tree() -> ZettelTree:
    """Tree with 1, 1.a, 1.a.1, 1.b, 2, 2.a."""
    return build_tree(SAMPLE_ENTRIES)


@pytest.fixture
def fake_store() -> FakeStore:
    return FakeStore(SAMPLE_ENTRIES)


@pytest.fixture
def fake_cache(fake_store: FakeStore) -> TreeCache:
    return TreeCache(fake_store.entries)


@pytest.fixture
def vault_dir(tmp_path: Path) -> Path:
    """A vault directory with a few notes, one unfiled and one archived."""
    root = tmp_path / "vault"
    for rel_path, text in VAULT_NOTES.items():
        path = root / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text)
    return root
