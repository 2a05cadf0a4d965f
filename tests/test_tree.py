"""
Tests tree locator / mutator
  find_block(tree, id)               → BlockLocation | None
  update_block / remove_block        → MutationResult(tree, found)
  duplicate_block(tree, id, gen)     → DuplicateResult(tree, found, new_root_id)
  insert_block / move_block          → MutationResult(tree, found)
"""
import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from block_editor.core.schemas import Block, MediaContent, TextContent
from block_editor.core.zones import ZONES_KEY, read_zones
from block_editor.tree import (
    collect_ids,
    duplicate_block,
    extract_block,
    find_block,
    find_parent,
    insert_block,
    move_block,
    remove_block,
    unique_id_source,
    update_block,
    validate_tree,
)
from factories import make_columns, make_container, make_leaf, sequential_ids, zone_members


def sample_tree():
    """[A, G(P, Q), X{z1:[B], z2:[C]}]"""
    return [
        make_leaf("A"),
        make_container("G", [make_leaf("P"), make_leaf("Q")]),
        make_columns("X", {"z1": [make_leaf("B")], "z2": [make_leaf("C")]}),
    ]


def assert_unique_ids(tree):
    ids = collect_ids(tree)
    assert len(ids) == len(set(ids))


# ── find ──────────────────────────────────────────────────────────────────

def test_find_root_block():
    loc = find_block(sample_tree(), "A")
    assert loc.block.id == "A"
    assert loc.path == (0,)


def test_find_nested_block_path():
    loc = find_block(sample_tree(), "Q")
    assert loc.path == (1, 1)


def test_find_missing():
    assert find_block(sample_tree(), "nope") is None


def test_find_is_preorder():
    assert collect_ids(sample_tree()) == ["A", "G", "P", "Q", "X", "B", "C"]


def test_find_parent():
    tree = sample_tree()
    assert find_parent(tree, "P").id == "G"
    assert find_parent(tree, "A") is None
    assert find_parent(tree, "nope") is None


# ── update ────────────────────────────────────────────────────────────────

def test_update_merges_top_level_fields():
    tree = sample_tree()
    result = update_block(tree, "P", {"label": "Intro", "styles": {"color": "red"}})
    assert result.found
    p = find_block(result.tree, "P").block
    assert p.label == "Intro"
    assert p.styles == {"color": "red"}


def test_update_is_shallow_merge():
    tree = [Block(id="p", name="core/paragraph", styles={"padding": "20px", "margin": "0px"})]
    result = update_block(tree, "p", {"styles": {"color": "red"}})
    assert result.tree[0].styles == {"color": "red"}


def test_update_keeps_untouched_subtrees_shared():
    tree = sample_tree()
    result = update_block(tree, "P", {"label": "x"})
    assert result.tree is not tree
    assert result.tree[0] is tree[0]
    assert result.tree[2] is tree[2]
    assert result.tree[1] is not tree[1]
    assert result.tree[1].children[1] is tree[1].children[1]


def test_update_does_not_mutate_input():
    tree = sample_tree()
    update_block(tree, "P", {"label": "x"})
    assert tree[1].children[0].label == ""


def test_update_missing_returns_same_tree():
    tree = sample_tree()
    result = update_block(tree, "nope", {"label": "x"})
    assert not result.found
    assert result.tree is tree


def test_update_empty_patch_is_identity():
    tree = sample_tree()
    result = update_block(tree, "P", {})
    assert result.found
    assert result.tree is tree
    assert result.tree == sample_tree()


def test_update_ignores_id_and_name():
    tree = sample_tree()
    result = update_block(tree, "P", {"id": "Z", "name": "core/heading", "label": "ok"})
    p = find_block(result.tree, "P").block
    assert p.name == "core/paragraph"
    assert p.label == "ok"
    assert find_block(result.tree, "Z") is None


def test_update_ignores_unknown_fields():
    tree = sample_tree()
    assert update_block(tree, "A", {"colour": "red"}).tree is tree


def test_update_validates_content_variant():
    tree = sample_tree()
    result = update_block(tree, "A", {"content": {"kind": "media", "url": "/a.png"}})
    assert isinstance(find_block(result.tree, "A").block.content, MediaContent)


def test_update_rejects_malformed_content():
    with pytest.raises(ValueError):
        update_block(sample_tree(), "A", {"content": {"kind": "text", "level": 9}})


def test_update_refuses_leaf_kind_on_populated_container():
    tree = sample_tree()
    result = update_block(tree, "G", {"kind": "block", "label": "g"})
    g = find_block(result.tree, "G").block
    assert g.kind == "container"
    assert [c.id for c in g.children] == ["P", "Q"]
    assert g.label == "g"


def test_update_empty_container_to_leaf_drops_children():
    tree = [make_container("G")]
    g = update_block(tree, "G", {"kind": "block"}).tree[0]
    assert g.kind == "block"
    assert g.children is None
    assert validate_tree([g]) == []


def test_update_leaf_to_container_gets_children_list():
    result = update_block([make_leaf("A")], "A", {"kind": "container"})
    assert result.tree[0].children == []


def test_update_leaf_cannot_receive_children():
    result = update_block([make_leaf("A")], "A", {"children": [make_leaf("B").model_dump()]})
    assert result.tree[0].children is None
    assert validate_tree(result.tree) == []


def test_update_children_purges_dropped_zone_members():
    tree = [make_columns("X", {"z1": [make_leaf("B"), make_leaf("D")], "z2": [make_leaf("C")]})]
    kept = [tree[0].children[0], tree[0].children[2]]
    x = update_block(tree, "X", {"children": kept}).tree[0]
    assert zone_members(x, "z1") == ["B"]
    assert zone_members(x, "z2") == ["C"]
    assert read_zones(x) is not None
    assert validate_tree([x]) == []


def test_update_children_places_new_child_in_last_zone():
    tree = [make_columns("X", {"z1": [make_leaf("B")], "z2": [make_leaf("C")]})]
    x = update_block(tree, "X", {"children": [*tree[0].children, make_leaf("N")]}).tree[0]
    assert zone_members(x, "z2") == ["C", "N"]
    assert validate_tree([x]) == []


def test_update_children_reorder_keeps_zone_map():
    tree = [make_columns("X", {"z1": [make_leaf("B")], "z2": [make_leaf("C")]})]
    x = update_block(tree, "X", {"children": list(reversed(tree[0].children))}).tree[0]
    assert x.settings == tree[0].settings


# ── remove ────────────────────────────────────────────────────────────────

def test_remove_then_find_is_absent():
    tree = sample_tree()
    for block_id in collect_ids(tree):
        result = remove_block(tree, block_id)
        assert result.found
        assert find_block(result.tree, block_id) is None


def test_remove_root_block():
    result = remove_block(sample_tree(), "A")
    assert [b.id for b in result.tree] == ["G", "X"]


def test_remove_subtree():
    result = remove_block(sample_tree(), "G")
    assert collect_ids(result.tree) == ["A", "X", "B", "C"]


def test_remove_purges_zone_membership():
    result = remove_block(sample_tree(), "B")
    x = find_block(result.tree, "X").block
    assert zone_members(x, "z1") == []
    assert zone_members(x, "z2") == ["C"]
    assert read_zones(x) is not None


def test_remove_missing():
    tree = sample_tree()
    result = remove_block(tree, "nope")
    assert not result.found
    assert result.tree is tree


def test_extract_returns_detached_block():
    tree, block = extract_block(sample_tree(), "G")
    assert block.id == "G"
    assert [c.id for c in block.children] == ["P", "Q"]


# ── duplicate ─────────────────────────────────────────────────────────────

def test_duplicate_leaf_inserted_after_original():
    result = duplicate_block(sample_tree(), "A", sequential_ids())
    assert result.found
    assert result.new_root_id == "new-1"
    assert [b.id for b in result.tree] == ["A", "new-1", "G", "X"]
    assert result.tree[1].content == result.tree[0].content


def test_duplicate_container_with_children():
    tree = sample_tree()
    result = duplicate_block(tree, "G", sequential_ids())
    assert [b.id for b in result.tree] == ["A", "G", "new-1", "X"]
    clone = result.tree[2]
    assert clone.kind == "container"
    assert [c.id for c in clone.children] == ["new-2", "new-3"]
    assert [c.content for c in clone.children] == [c.content for c in tree[1].children]
    assert_unique_ids(result.tree)


def test_duplicate_fresh_ids_for_every_node():
    tree = sample_tree()
    original_ids = set(collect_ids(tree))
    result = duplicate_block(tree, "X", sequential_ids())
    clone = find_block(result.tree, result.new_root_id).block
    clone_ids = collect_ids([clone])
    assert len(clone_ids) == 3
    assert not original_ids.intersection(clone_ids)
    assert_unique_ids(result.tree)


def test_duplicate_remaps_zone_members():
    result = duplicate_block(sample_tree(), "X", sequential_ids())
    clone = find_block(result.tree, result.new_root_id).block
    assert zone_members(clone, "z1") == ["new-2"]
    assert zone_members(clone, "z2") == ["new-3"]
    assert read_zones(clone) is not None


def test_duplicate_does_not_share_mutable_state():
    tree = sample_tree()
    result = duplicate_block(tree, "X", sequential_ids())
    clone = find_block(result.tree, result.new_root_id).block
    assert clone.settings[ZONES_KEY] is not tree[2].settings[ZONES_KEY]
    assert zone_members(tree[2], "z1") == ["B"]


def test_duplicate_inside_zone_stays_in_same_zone():
    result = duplicate_block(sample_tree(), "B", sequential_ids())
    x = find_block(result.tree, "X").block
    assert zone_members(x, "z1") == ["B", "new-1"]
    assert read_zones(x) is not None


def test_duplicate_missing():
    tree = sample_tree()
    result = duplicate_block(tree, "nope", sequential_ids())
    assert not result.found
    assert result.new_root_id is None
    assert result.tree is tree


def test_duplicate_skips_colliding_ids():
    ids = iter(["A", "G", "fresh"])
    result = duplicate_block(sample_tree(), "A", lambda: next(ids))
    assert result.new_root_id == "fresh"


def test_unique_id_source_gives_up():
    next_id = unique_id_source(lambda: "A", {"A"})
    with pytest.raises(ValueError):
        next_id()


# ── insert / move ─────────────────────────────────────────────────────────

def test_insert_at_root_clamped():
    tree = sample_tree()
    result = insert_block(tree, make_leaf("N"), index=99)
    assert [b.id for b in result.tree] == ["A", "G", "X", "N"]


def test_insert_into_group():
    result = insert_block(sample_tree(), make_leaf("N"), "G", 0)
    assert [c.id for c in find_block(result.tree, "G").block.children] == ["N", "P", "Q"]


def test_insert_into_zone_appends_child():
    result = insert_block(sample_tree(), make_leaf("N"), "X", 0, "z2")
    x = find_block(result.tree, "X").block
    assert [c.id for c in x.children] == ["B", "C", "N"]
    assert zone_members(x, "z2") == ["N", "C"]


def test_insert_into_unknown_zone_refused():
    tree = sample_tree()
    result = insert_block(tree, make_leaf("N"), "X", 0, "z9")
    assert not result.found
    assert result.tree is tree


def test_insert_into_leaf_refused():
    assert not insert_block(sample_tree(), make_leaf("N"), "A").found


def test_insert_refuses_duplicate_id():
    tree = sample_tree()
    result = insert_block(tree, make_leaf("P"))
    assert not result.found
    assert result.tree is tree


def test_move_between_containers():
    result = move_block(sample_tree(), "P", "X", 0, "z2")
    x = find_block(result.tree, "X").block
    assert zone_members(x, "z2") == ["P", "C"]
    assert [c.id for c in find_block(result.tree, "G").block.children] == ["Q"]
    assert validate_tree(result.tree) == []


def test_move_into_own_descendant_refused():
    tree = [make_container("G", [make_container("H")])]
    result = move_block(tree, "G", "H")
    assert not result.found
    assert result.tree is tree


# ── validate ──────────────────────────────────────────────────────────────

def test_validate_clean_tree():
    assert validate_tree(sample_tree()) == []


def test_validate_reports_duplicate_ids():
    problems = validate_tree([make_leaf("A"), make_container("G", [make_leaf("A")])])
    assert any("A" in p for p in problems)


def test_validate_reports_inconsistent_zone_map():
    x = make_container("X", [make_leaf("B")], settings={ZONES_KEY: [{"zone_id": "z1", "block_ids": []}]})
    assert validate_tree([x]) == ["X : zone map incohérente avec children"]
