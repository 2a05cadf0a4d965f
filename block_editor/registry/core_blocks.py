"""Définitions des blocs core/* (compatibles Gutenberg)."""
from ..core.schemas import (
    EmptyContent,
    HtmlContent,
    MarkdownContent,
    MediaContent,
    StructuredContent,
    TextContent,
)
from ..core.zones import ZONES_KEY
from .base import BlockDefinition


# ── Basic ────────────────────────────────────────────────────────────────────

HEADING = BlockDefinition(
    name="core/heading", label="Heading", category="basic",
    description="Titre de section (h1–h6)",
    default_content=TextContent(value="Heading", level=2),
)

PARAGRAPH = BlockDefinition(
    name="core/paragraph", label="Paragraph", category="basic",
    default_content=TextContent(value="Start writing..."),
)

BUTTON = BlockDefinition(
    name="core/button", label="Button", category="basic",
    default_content=TextContent(value="Click me", link="#"),
)

BUTTONS = BlockDefinition(
    name="core/buttons", label="Buttons", category="basic",
    default_content=StructuredContent(data={
        "buttons": [{"id": "button-1", "text": "Click me", "url": "#"}],
        "orientation": "horizontal",
    }),
)

LIST = BlockDefinition(
    name="core/list", label="List", category="basic",
    default_content=TextContent(value="<li>List item</li>", ordered=False),
)

QUOTE = BlockDefinition(
    name="core/quote", label="Quote", category="basic",
    default_content=TextContent(value="Quote", citation=""),
)

PULLQUOTE = BlockDefinition(
    name="core/pullquote", label="Pullquote", category="basic",
    default_content=TextContent(value="Pullquote", citation="", text_align="center"),
)

# ── Media ────────────────────────────────────────────────────────────────────

IMAGE = BlockDefinition(
    name="core/image", label="Image", category="media",
    default_content=MediaContent(media_type="image"),
)

GALLERY = BlockDefinition(
    name="core/gallery", label="Gallery", category="media",
    default_content=StructuredContent(data={"images": [], "columns": 3}),
)

VIDEO = BlockDefinition(
    name="core/video", label="Video", category="media",
    default_content=MediaContent(media_type="video"),
)

AUDIO = BlockDefinition(
    name="core/audio", label="Audio", category="media",
    default_content=MediaContent(media_type="audio"),
)

FILE = BlockDefinition(
    name="core/file", label="File", category="media",
    default_content=MediaContent(media_type="file"),
)

MEDIA_TEXT = BlockDefinition(
    name="core/media-text", label="Media & Text", category="media",
    default_content=MediaContent(media_type="image", caption="Media text"),
)

COVER = BlockDefinition(
    name="core/cover", label="Cover", category="media",
    default_content=MediaContent(media_type="image"),
    default_styles={"minHeight": "430px"},
)

# ── Layout ───────────────────────────────────────────────────────────────────

COLUMNS = BlockDefinition(
    name="core/columns", label="Columns", category="layout", is_container=True,
    description="Conteneur multi-zones : une zone par colonne",
    default_content=StructuredContent(data={
        "gap": "20px",
        "verticalAlignment": "top",
        "horizontalAlignment": "left",
        "direction": "row",
    }),
    default_settings={ZONES_KEY: [
        {"zone_id": "col-1", "width": "50%", "block_ids": []},
        {"zone_id": "col-2", "width": "50%", "block_ids": []},
    ]},
)

GROUP = BlockDefinition(
    name="core/group", label="Group", category="layout", is_container=True,
    default_content=StructuredContent(data={"tagName": "div", "layout": "flow"}),
)

SPACER = BlockDefinition(
    name="core/spacer", label="Spacer", category="layout",
    default_content=StructuredContent(data={"height": "40px"}),
)

SEPARATOR = BlockDefinition(
    name="core/separator", label="Separator", category="layout",
    default_content=EmptyContent(),
)

# ── Advanced ─────────────────────────────────────────────────────────────────

CODE = BlockDefinition(
    name="core/code", label="Code", category="advanced",
    default_content=StructuredContent(data={"content": "", "language": "plaintext"}),
)

PREFORMATTED = BlockDefinition(
    name="core/preformatted", label="Preformatted", category="advanced",
    default_content=StructuredContent(data={"content": ""}),
)

HTML = BlockDefinition(
    name="core/html", label="Custom HTML", category="advanced",
    default_content=HtmlContent(value="<p>Custom HTML</p>"),
)

MARKDOWN = BlockDefinition(
    name="core/markdown", label="Markdown", category="advanced",
    default_content=MarkdownContent(value="# Markdown"),
)

TABLE = BlockDefinition(
    name="core/table", label="Table", category="advanced",
    default_content=StructuredContent(data={
        "headers": ["Column 1", "Column 2"],
        "rows": [["", ""]],
        "hasFixedLayout": False,
    }),
)


CORE_BLOCKS = [
    HEADING, PARAGRAPH, BUTTON, BUTTONS, LIST, QUOTE, PULLQUOTE,
    IMAGE, GALLERY, VIDEO, AUDIO, FILE, MEDIA_TEXT, COVER,
    COLUMNS, GROUP, SPACER, SEPARATOR,
    CODE, PREFORMATTED, HTML, MARKDOWN, TABLE,
]
