"""Tests for subtree remapping."""

import string

from zettel_index.core.ids.parser import parse_identifier
from zettel_index.core.tree.builder import build_tree
from zettel_index.core.tree.navigation import find_node, is_same_or_descendant
from zettel_index.core.tree.remap import remap_to_explicit_id, remap_under_parent
from zettel_index.models.node import RemapFailure, RemapFailureReason, ZettelTree


def _remap(tree: ZettelTree, source: str, target: str | None, **kwargs: int) -> dict[str, str]:
    result = remap_under_parent(tree, find_node(tree, source), target, **kwargs)
    assert not isinstance(result, RemapFailure), result
    return result


def test_move_under_sibling_avoids_collisions() -> None:
    tree = build_tree([("1", "x"), ("1.a", "y"), ("2", "z")])
    remap = _remap(tree, "1", "2")
    assert remap == {"1": "2.a", "1.a": "2.a.1"}
    existing_outside = {"2"}
    assert not existing_outside & set(remap.values())


def test_move_skips_existing_children_of_target() -> None:
    tree = build_tree([("1", "x"), ("1.a", "y"), ("2", "z"), ("2.a", "w"), ("2.b", "v")])
    remap = _remap(tree, "1", "2")
    assert remap["1"] == "2.c"
    assert remap["1.a"] == "2.c.1"


def test_descendants_stay_under_new_root() -> None:
    tree = build_tree(
        [("3", "a"), ("3.a", "b"), ("3.a.1", "c"), ("3.b", "d"), ("3.b.1.a", "e"), ("5.c", "f")]
    )
    remap = _remap(tree, "3", "5.c")
    new_root = parse_identifier(remap["3"])
    assert new_root.text == "5.c.1"
    for old, new in remap.items():
        assert is_same_or_descendant(new_root, parse_identifier(new)), (old, new)
        assert parse_identifier(new).depth - parse_identifier(old).depth == 2


def test_mapping_covers_path_nodes() -> None:
    tree = build_tree([("1.a.1", "only leaf has a note"), ("2", "z")])
    remap = _remap(tree, "1", "2")
    assert set(remap) == {"1", "1.a", "1.a.1"}
    assert remap == {"1": "2.a", "1.a": "2.a.1", "1.a.1": "2.a.1.a"}


def test_sibling_order_is_preserved_and_compacted() -> None:
    tree = build_tree([("4", "r"), ("4.b", "x"), ("4.d", "y"), ("4.f", "z"), ("1", "t")])
    remap = _remap(tree, "4", "1")
    assert [remap[k] for k in ("4.b", "4.d", "4.f")] == ["1.a.1", "1.a.2", "1.a.3"]


def test_descendant_collision_probes_next_segment() -> None:
    # 2.a.1 exists outside the moved subtree, so the first child slides to 2.a.2
    tree = build_tree([("1", "x"), ("1.a", "y"), ("2.a.1", "z")])
    remap = _remap(tree, "1", "2.a")
    assert remap["1"] == "2.a.2"
    assert remap["1.a"] == "2.a.2.a"


def test_own_identifiers_are_not_collisions() -> None:
    tree = build_tree([("1", "x"), ("1.a", "y"), ("1.b", "z")])
    remap = _remap(tree, "1.b", None)
    assert remap == {"1.b": "2"}


def test_move_to_top_level() -> None:
    tree = build_tree([("1", "x"), ("1.a", "y"), ("1.a.1", "z"), ("2", "w")])
    remap = _remap(tree, "1.a", None)
    assert remap == {"1.a": "3", "1.a.1": "3.a"}


def test_move_within_own_parent_reuses_free_slot() -> None:
    tree = build_tree([("1", "x"), ("1.b", "y")])
    remap = _remap(tree, "1.b", "1")
    assert remap == {"1.b": "1.a"}


def test_exhaustion_is_reported() -> None:
    entries = [("2", "target")] + [(f"2.{c}", c) for c in string.ascii_lowercase] + [("1", "src")]
    tree = build_tree(entries)
    result = remap_under_parent(tree, find_node(tree, "1"), "2", max_attempts=1)
    assert isinstance(result, RemapFailure)
    assert result.reason is RemapFailureReason.EXHAUSTED
    assert result.attempts == 1


def test_default_ceiling_finds_slot_past_dense_occupancy() -> None:
    entries = [("2", "target")] + [(f"2.{c}", c) for c in string.ascii_lowercase] + [("1", "src")]
    tree = build_tree(entries)
    assert _remap(tree, "1", "2") == {"1": "2.aa"}


def test_explicit_id() -> None:
    tree = build_tree([("1", "x"), ("1.a", "y"), ("1.b", "z"), ("2", "w")])
    result = remap_to_explicit_id(tree, find_node(tree, "1"), "7")
    assert result == {"1": "7", "1.a": "7.a", "1.b": "7.b"}


def test_explicit_id_alternates_from_its_last_segment() -> None:
    tree = build_tree([("1", "x"), ("1.a", "y")])
    result = remap_to_explicit_id(tree, find_node(tree, "1"), "3.c")
    assert result == {"1": "3.c", "1.a": "3.c.1"}


def test_explicit_id_collision_fails_without_retry() -> None:
    tree = build_tree([("1", "x"), ("2", "y")])
    result = remap_to_explicit_id(tree, find_node(tree, "1"), "2")
    assert isinstance(result, RemapFailure)
    assert result.reason is RemapFailureReason.COLLISION


def test_explicit_id_collision_is_case_insensitive() -> None:
    tree = build_tree([("1", "x"), ("3.B", "y")])
    result = remap_to_explicit_id(tree, find_node(tree, "1"), "3.b")
    assert isinstance(result, RemapFailure)


def test_explicit_blank_id_is_invalid() -> None:
    tree = build_tree([("1", "x")])
    result = remap_to_explicit_id(tree, find_node(tree, "1"), " . ")
    assert isinstance(result, RemapFailure)
    assert result.reason is RemapFailureReason.INVALID_IDENTIFIER


def test_remap_does_not_touch_tree() -> None:
    tree = build_tree([("1", "x"), ("1.a", "y"), ("2", "z")])
    before = [n.id for n in tree.iter_nodes()]
    _remap(tree, "1", "2")
    assert [n.id for n in tree.iter_nodes()] == before


def test_descending_tree_keeps_ascending_sibling_order() -> None:
    tree = build_tree(
        [("4", "w"), ("4.b", "x"), ("4.d", "y"), ("1", "z")], descending=True
    )
    assert _remap(tree, "4", "1") == {"4": "1.a", "4.b": "1.a.1", "4.d": "1.a.2"}


def test_new_ids_use_stored_spelling_of_target() -> None:
    tree = build_tree([("2.a", "x"), ("3", "y")])
    assert _remap(tree, "3", "2.A") == {"3": "2.a.1"}
