"""Tests schémas — Block, union de contenu, invariant children."""
import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from pydantic import ValidationError

from block_editor.core.schemas import (
    Block,
    EmptyContent,
    HtmlContent,
    MediaContent,
    StructuredContent,
    TextContent,
    Zone,
)


# ── Block ────────────────────────────────────────────────────────────────────

def test_block_defaults():
    b = Block(id="b-1", name="core/paragraph")
    assert b.kind == "block"
    assert b.children is None
    assert isinstance(b.content, EmptyContent)
    assert b.styles == {} and b.settings == {}
    assert not b.is_container


def test_container_children_default_to_empty_list():
    c = Block(id="c-1", name="core/group", kind="container")
    assert c.children == []
    assert c.is_container


def test_leaf_with_children_is_rejected():
    with pytest.raises(ValidationError):
        Block(id="b-1", name="core/paragraph", children=[])


def test_nested_children_are_parsed_recursively():
    raw = {
        "id": "g", "name": "core/group", "kind": "container",
        "children": [
            {"id": "p", "name": "core/paragraph", "content": {"kind": "text", "value": "x"}},
            {"id": "g2", "name": "core/group", "kind": "container", "children": []},
        ],
    }
    g = Block.model_validate(raw)
    assert [child.id for child in g.children] == ["p", "g2"]
    assert isinstance(g.children[0].content, TextContent)
    assert g.children[1].children == []


def test_block_roundtrips_through_dump():
    b = Block(id="i", name="core/image", content=MediaContent(url="/a.png", alt="A"))
    assert Block.model_validate(b.model_dump()) == b


# ── Contenu ──────────────────────────────────────────────────────────────────

@pytest.mark.parametrize("raw, expected", [
    ({"kind": "text", "value": "Bonjour"}, TextContent),
    ({"kind": "markdown", "value": "# Titre"}, None),
    ({"kind": "media", "url": "/v.mp4", "media_type": "video"}, MediaContent),
    ({"kind": "html", "value": "<b>x</b>"}, HtmlContent),
    ({"kind": "structured", "data": {"gap": "2em"}}, StructuredContent),
    ({"kind": "empty"}, EmptyContent),
])
def test_content_discriminator(raw, expected):
    b = Block(id="b", name="core/x", content=raw)
    assert b.content.kind == raw["kind"]
    if expected is not None:
        assert isinstance(b.content, expected)


def test_unknown_content_kind_is_rejected():
    with pytest.raises(ValidationError):
        Block(id="b", name="core/x", content={"kind": "video-embed", "value": "?"})


def test_heading_level_is_bounded():
    with pytest.raises(ValidationError):
        TextContent(value="T", level=7)


def test_zone_defaults():
    z = Zone(zone_id="col-1")
    assert z.block_ids == []
    assert z.width is None
