"""
EditorSession — boucle d'édition côté appelant : arbre courant + historique +
sélection. Chaque mutation effective pousse un snapshot ; les no-op non.
"""
import logging
from typing import Any, Mapping, Optional

from .core.schemas import Tree
from .dnd import DragGesture, DragOutcome, FocusPanel, resolve_drag
from .history import History
from .registry import BlockRegistry, new_block_id
from .tree import IdGenerator, MutationResult, duplicate_block, find_block, remove_block, update_block

log = logging.getLogger(__name__)


class EditorSession:
    """
    Session d'édition d'une page.

    Usage:
        >>> session = EditorSession(default_catalog())
        >>> session.handle_drag(DragGesture(
        ...     source_zone="block-library", source_index=0,
        ...     destination_zone="canvas", destination_index=0,
        ...     dragged_id="core/heading",
        ... ))
        >>> session.undo()
    """

    def __init__(
        self,
        registry: BlockRegistry,
        blocks: Optional[Tree] = None,
        id_generator: IdGenerator = new_block_id,
        history_limit: Optional[int] = None,
    ):
        self.registry = registry
        self.id_generator = id_generator
        self.history: History[Tree] = History(list(blocks or []), limit=history_limit)
        self.selected_block_id: Optional[str] = None
        self.active_panel: FocusPanel = "blocks"

    @property
    def blocks(self) -> Tree:
        return self.history.current()

    @property
    def can_undo(self) -> bool:
        return self.history.can_undo

    @property
    def can_redo(self) -> bool:
        return self.history.can_redo

    def _commit(self, tree: Tree) -> None:
        if tree is not self.blocks:
            self.history.push(tree)

    def select(self, block_id: Optional[str]) -> bool:
        """Sélectionne un bloc existant (ou désélectionne avec None)."""
        if block_id is not None and find_block(self.blocks, block_id) is None:
            return False
        self.selected_block_id = block_id
        return True

    def handle_drag(self, gesture: DragGesture) -> DragOutcome:
        outcome = resolve_drag(self.blocks, gesture, self.registry, self.id_generator)
        if outcome.changed:
            self._commit(outcome.tree)
            if outcome.select_block_id:
                self.selected_block_id = outcome.select_block_id
            if outcome.focus_panel:
                self.active_panel = outcome.focus_panel
        return outcome

    def update(self, block_id: str, patch: Mapping[str, Any]) -> MutationResult:
        result = update_block(self.blocks, block_id, patch)
        self._commit(result.tree)
        return result

    def remove(self, block_id: str) -> MutationResult:
        result = remove_block(self.blocks, block_id)
        if result.found:
            self._commit(result.tree)
            if self.selected_block_id and find_block(result.tree, self.selected_block_id) is None:
                self.selected_block_id = None
        return result

    def duplicate(self, block_id: str) -> Optional[str]:
        """Duplique un bloc et sélectionne la copie ; retourne son id (None si introuvable)."""
        result = duplicate_block(self.blocks, block_id, self.id_generator)
        if not result.found:
            return None
        self._commit(result.tree)
        self.selected_block_id = result.new_root_id
        return result.new_root_id

    def undo(self) -> Tree:
        tree = self.history.undo()
        self._drop_stale_selection()
        return tree

    def redo(self) -> Tree:
        tree = self.history.redo()
        self._drop_stale_selection()
        return tree

    def _drop_stale_selection(self) -> None:
        if self.selected_block_id and find_block(self.blocks, self.selected_block_id) is None:
            log.debug("Sélection %s absente du snapshot courant", self.selected_block_id)
            self.selected_block_id = None
