"""Core module pour block_editor."""
from .schemas import (
    Block,
    BlockContent,
    BlockKind,
    TextContent,
    MarkdownContent,
    MediaContent,
    HtmlContent,
    StructuredContent,
    EmptyContent,
    Zone,
    Tree,
)
from .zones import ZONES_KEY, read_zones, is_multi_zone

__all__ = [
    "Block",
    "BlockContent",
    "BlockKind",
    "TextContent",
    "MarkdownContent",
    "MediaContent",
    "HtmlContent",
    "StructuredContent",
    "EmptyContent",
    "Zone",
    "Tree",
    "ZONES_KEY",
    "read_zones",
    "is_multi_zone",
]
