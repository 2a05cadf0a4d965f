"""
Block Editor v1.0 — moteur d'édition du page builder visuel.

Arbre de blocs imbriqués + mutations pures + resolver drag-and-drop + undo/redo.

Usage (mutations directes):
    >>> from block_editor import default_catalog, insert_block, duplicate_block, new_block_id
    >>> catalog = default_catalog()
    >>> tree = insert_block([], catalog.create_default("core/heading", "h-1")).tree
    >>> tree = duplicate_block(tree, "h-1", new_block_id).tree

Usage (session d'édition):
    >>> from block_editor import EditorSession, DragGesture, default_catalog
    >>> session = EditorSession(default_catalog())
    >>> session.handle_drag(DragGesture(
    ...     source_zone="block-library", source_index=0,
    ...     destination_zone="canvas", destination_index=0,
    ...     dragged_id="core/columns",
    ... ))
    >>> session.undo()
"""

# ── Modèle ──────────────────────────────────────────────────────────────────
from .core import (
    Block,
    BlockContent,
    TextContent,
    MarkdownContent,
    MediaContent,
    HtmlContent,
    StructuredContent,
    EmptyContent,
    Zone,
    Tree,
    ZONES_KEY,
    read_zones,
    is_multi_zone,
)

# ── Mutations ───────────────────────────────────────────────────────────────
from .tree import (
    BlockLocation,
    MutationResult,
    DuplicateResult,
    find_block,
    find_parent,
    iter_blocks,
    collect_ids,
    update_block,
    remove_block,
    extract_block,
    duplicate_block,
    insert_block,
    move_block,
    validate_tree,
)

# ── Drag-and-drop ───────────────────────────────────────────────────────────
from .dnd import (
    CANVAS_ZONE,
    PALETTE_ZONE,
    DragGesture,
    DragOutcome,
    DragStatus,
    classify_zone,
    zone_identifier,
    resolve_drag,
)

# ── Historique, registry, session, migration ────────────────────────────────
from .history import History
from .registry import BlockCatalog, BlockDefinition, BlockRegistry, default_catalog, new_block_id
from .session import EditorSession
from .migration import migrate_legacy_columns, repair_zones, repair_tree

__version__ = "1.0.0"

__all__ = [
    # modèle
    "Block", "BlockContent", "TextContent", "MarkdownContent", "MediaContent",
    "HtmlContent", "StructuredContent", "EmptyContent", "Zone", "Tree",
    "ZONES_KEY", "read_zones", "is_multi_zone",
    # mutations
    "BlockLocation", "MutationResult", "DuplicateResult",
    "find_block", "find_parent", "iter_blocks", "collect_ids",
    "update_block", "remove_block", "extract_block", "duplicate_block",
    "insert_block", "move_block", "validate_tree",
    # drag-and-drop
    "CANVAS_ZONE", "PALETTE_ZONE", "DragGesture", "DragOutcome", "DragStatus",
    "classify_zone", "zone_identifier", "resolve_drag",
    # historique, registry, session, migration
    "History",
    "BlockCatalog", "BlockDefinition", "BlockRegistry", "default_catalog", "new_block_id",
    "EditorSession",
    "migrate_legacy_columns", "repair_zones", "repair_tree",
]
