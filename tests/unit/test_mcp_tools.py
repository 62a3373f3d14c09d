"""Tests for MCP tool core functions."""

from pathlib import Path

import pytest

from zettel_index.core.snapshot import TreeCache
from zettel_index.core.vault.store import MarkdownVault
from zettel_index.mcp.server import (
    _resolve_vault,
    zettel_get_tree,
    zettel_list_unfiled,
    zettel_move_node,
    zettel_next_id,
    zettel_renumber_node,
)


def _open(vault_dir: Path) -> tuple[MarkdownVault, TreeCache]:
    vault = MarkdownVault(vault_dir)
    return vault, TreeCache(vault.entries)


def test_get_tree_returns_markdown(vault_dir: Path) -> None:
    _vault, cache = _open(vault_dir)
    result = zettel_get_tree(cache)
    assert "- 1.a: autopoiesis" in result["content"]
    assert result["node_count"] == 6


def test_get_tree_below_includes_breadcrumbs(vault_dir: Path) -> None:
    _vault, cache = _open(vault_dir)
    result = zettel_get_tree(cache, below="1.a.1")
    assert result["breadcrumbs"] == "1 > 1.a"


def test_get_tree_unknown_node(vault_dir: Path) -> None:
    _vault, cache = _open(vault_dir)
    assert "error" in zettel_get_tree(cache, below="7")


def test_get_tree_descending(vault_dir: Path) -> None:
    _vault, cache = _open(vault_dir)
    lines = zettel_get_tree(cache, descending=True)["content"].splitlines()
    assert lines[0] == "- 9: old"


def test_list_unfiled(vault_dir: Path) -> None:
    vault, _cache = _open(vault_dir)
    result = zettel_list_unfiled(vault)
    assert result == {"notes": [{"title": "inbox", "path": "inbox.md"}], "count": 1}


def test_next_id(vault_dir: Path) -> None:
    _vault, cache = _open(vault_dir)
    assert zettel_next_id(cache, parent="2") == {"identifier": "2.b", "parent": "2"}
    assert zettel_next_id(cache) == {"identifier": "3"}
    assert "error" in zettel_next_id(cache, parent="5")


def test_move_node_dry_run_then_apply(vault_dir: Path) -> None:
    vault, cache = _open(vault_dir)
    preview = zettel_move_node(vault, cache, source="2", target_parent="1", dry_run=True)
    assert preview["remap"] == {"2": "1.b", "2.a": "1.b.1"}

    applied = zettel_move_node(vault, cache, source="2", target_parent="1")
    assert applied["success"]
    assert applied["updated"] == 1
    assert zettel_next_id(cache, parent="1.b") == {"identifier": "1.b.2", "parent": "1.b"}


def test_renumber_node(vault_dir: Path) -> None:
    vault, cache = _open(vault_dir)
    result = zettel_renumber_node(vault, cache, source="9", new_id="1.a.5")
    assert result["success"]
    assert result["remap"] == {"9": "1.a.5"}


def test_resolve_vault_uses_configured_property(
    vault_dir: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("ZETTEL_VAULT_DIR", str(vault_dir))
    monkeypatch.setattr("zettel_index.mcp.server.DEFAULT_ID_PROPERTY", "luhmann")
    vault = _resolve_vault()
    assert vault.root == vault_dir.resolve()
    assert vault.id_property == "luhmann"
