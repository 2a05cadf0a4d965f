"""
Geste de drag-and-drop + classification des identifiants de zone + résultat.

Identifiants de zone reconnus :
    "block-library"              palette (pas encore un nœud : à instancier)
    "canvas"                     liste racine
    "<containerId>:zone:<zoneId>"  sous-zone d'un conteneur multi-zones
    "<containerId>:column:<n>"     forme positionnelle historique (n-ième zone)
"""
import re
from dataclasses import dataclass
from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel

from ..core.schemas import Tree

PALETTE_ZONE = "block-library"
CANVAS_ZONE = "canvas"

_ZONE_RE = re.compile(r"^(?P<container>.+?):zone:(?P<zone>.+)$")
_COLUMN_RE = re.compile(r"^(?P<container>.+?):column:(?P<position>\d+)$")


class ZoneCategory(str, Enum):
    PALETTE = "palette"
    CANVAS = "canvas"
    ZONE = "zone"


class ZoneRef(BaseModel):
    category: ZoneCategory
    container_id: Optional[str] = None
    zone_id: Optional[str] = None
    position: Optional[int] = None


def classify_zone(identifier: Optional[str]) -> Optional[ZoneRef]:
    """Classe un identifiant de zone ; None si aucun motif ne correspond."""
    if not identifier:
        return None
    if identifier == PALETTE_ZONE:
        return ZoneRef(category=ZoneCategory.PALETTE)
    if identifier == CANVAS_ZONE:
        return ZoneRef(category=ZoneCategory.CANVAS)

    match = _ZONE_RE.match(identifier)
    if match:
        return ZoneRef(category=ZoneCategory.ZONE,
                       container_id=match.group("container"), zone_id=match.group("zone"))
    match = _COLUMN_RE.match(identifier)
    if match:
        return ZoneRef(category=ZoneCategory.ZONE,
                       container_id=match.group("container"), position=int(match.group("position")))
    return None


def zone_identifier(container_id: str, zone_id: str) -> str:
    """Inverse de classify_zone pour une sous-zone."""
    return f"{container_id}:zone:{zone_id}"


class DragGesture(BaseModel):
    """Fin de drag telle que rapportée par la couche vue."""
    source_zone: str
    source_index: int
    destination_zone: Optional[str] = None  # None = lâché hors de toute zone
    destination_index: int = 0
    dragged_id: str  # clé de type depuis la palette, id de bloc sinon


FocusPanel = Literal["blocks", "settings"]


class DragStatus(str, Enum):
    APPLIED = "applied"
    NOOP = "noop"
    UNRESOLVABLE = "unresolvable"


@dataclass(frozen=True)
class DragOutcome:
    """
    Résultat d'un geste. Hors APPLIED, `tree` est la référence d'entrée
    (aucune copie) et aucun hint n'est fourni.
    """
    tree: Tree
    status: DragStatus
    select_block_id: Optional[str] = None
    focus_panel: Optional[FocusPanel] = None

    @property
    def changed(self) -> bool:
        return self.status is DragStatus.APPLIED

    @classmethod
    def noop(cls, tree: Tree) -> "DragOutcome":
        return cls(tree, DragStatus.NOOP)

    @classmethod
    def unresolvable(cls, tree: Tree) -> "DragOutcome":
        return cls(tree, DragStatus.UNRESOLVABLE)
