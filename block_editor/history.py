"""
Historique undo/redo — liste bornée de snapshots d'arbre.

push après un undo abandonne la branche redo. Au-delà de la limite, le plus
ancien snapshot est évincé et l'index continue de pointer sur le dernier push.
Les snapshots sont des valeurs opaques, jamais modifiées.
"""
import logging
from typing import Generic, List, Optional, Tuple, TypeVar

from . import config

log = logging.getLogger(__name__)

T = TypeVar("T")


class History(Generic[T]):
    """
    Historique borné.

    Usage:
        >>> history = History(initial_tree)
        >>> history.push(new_tree)
        >>> history.undo()
        >>> history.current() is initial_tree
        True
    """

    def __init__(self, initial: T, limit: Optional[int] = None):
        self.limit = limit if limit is not None else config.settings.history_limit
        if self.limit < 1:
            raise ValueError(f"Limite d'historique invalide : {self.limit}")
        self._entries: List[T] = [initial]
        self._index = 0

    def push(self, snapshot: T) -> None:
        del self._entries[self._index + 1:]
        self._entries.append(snapshot)
        if len(self._entries) > self.limit:
            evicted = len(self._entries) - self.limit
            del self._entries[:evicted]
            log.debug("Historique plein : %d snapshot(s) évincé(s)", evicted)
        self._index = len(self._entries) - 1

    def undo(self) -> T:
        if self.can_undo:
            self._index -= 1
        return self.current()

    def redo(self) -> T:
        if self.can_redo:
            self._index += 1
        return self.current()

    def current(self) -> T:
        return self._entries[self._index]

    @property
    def can_undo(self) -> bool:
        return self._index > 0

    @property
    def can_redo(self) -> bool:
        return self._index < len(self._entries) - 1

    @property
    def index(self) -> int:
        return self._index

    @property
    def entries(self) -> Tuple[T, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
