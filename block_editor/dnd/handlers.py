"""
Handlers des six motifs de drag-and-drop.

Chaque handler est pur : (arbre, paramètres du geste) → DragOutcome.
Les index destination sont des positions dans la liste destination *après*
retrait du bloc déplacé (convention de la couche DnD), bornées à [0, len].
Un geste appliqué sélectionne le bloc ajouté ou déplacé et ouvre le panneau
"settings" ; un no-op ne porte aucun hint.
"""
import logging
from typing import List, NamedTuple, Optional

from ..core.schemas import Block, Tree, Zone
from ..core import zones as zone_map
from ..registry import BlockRegistry
from ..tree import (
    BlockLocation,
    IdGenerator,
    collect_ids,
    contains,
    extract_block,
    find_block,
    insert_block,
    unique_id_source,
    update_block,
)
from .gesture import DragOutcome, DragStatus, ZoneCategory, ZoneRef

log = logging.getLogger(__name__)


# ── Résolution des zones ─────────────────────────────────────────────────────

class ResolvedZone(NamedTuple):
    """Zone concrète : conteneur propriétaire + zone (None = liste children à plat)."""
    owner: BlockLocation
    zones: Optional[List[Zone]]
    zone: Optional[Zone]

    @property
    def owner_id(self) -> str:
        return self.owner.block.id

    @property
    def zone_id(self) -> Optional[str]:
        return self.zone.zone_id if self.zone is not None else None

    @property
    def members(self) -> List[str]:
        if self.zone is not None:
            return list(self.zone.block_ids)
        return [child.id for child in self.owner.block.children or []]


def resolve_zone(tree: Tree, ref: ZoneRef) -> Optional[ResolvedZone]:
    """
    Associe une ZoneRef à son conteneur dans l'arbre.

    Un conteneur sans zone map valide (single-zone, ou zone map incohérente)
    expose sa liste children comme unique zone.
    """
    location = find_block(tree, ref.container_id) if ref.container_id else None
    if location is None or not location.block.is_container:
        return None

    zones = zone_map.read_zones(location.block)
    if zones is None:
        return ResolvedZone(location, None, None)

    if ref.zone_id is not None:
        zone = zone_map.find_zone(zones, ref.zone_id)
    elif ref.position is not None and ref.position < len(zones):
        zone = zones[ref.position]
    else:
        zone = None
    if zone is None:
        return None
    return ResolvedZone(location, zones, zone)


def _locate(members: List[str], index: int, dragged_id: str) -> Optional[int]:
    """Position du bloc déplacé : `index` s'il désigne bien `dragged_id`, sinon sa position réelle."""
    if 0 <= index < len(members) and members[index] == dragged_id:
        return index
    if dragged_id in members:
        log.debug("Index source %d obsolète pour %s", index, dragged_id)
        return members.index(dragged_id)
    return None


def _applied(tree: Tree, select_block_id: Optional[str] = None, focus_panel=None) -> DragOutcome:
    return DragOutcome(tree, DragStatus.APPLIED, select_block_id, focus_panel)


# ── 1 & 2 : palette → canvas / zone ─────────────────────────────────────────

def add_from_palette(
    tree: Tree,
    destination: ZoneRef,
    destination_index: int,
    type_key: str,
    registry: BlockRegistry,
    id_generator: IdGenerator,
) -> DragOutcome:
    next_id = unique_id_source(id_generator, set(collect_ids(tree)))
    block = registry.create_default(type_key, next_id())
    if block is None:
        log.debug("Type de bloc inconnu %r : drag ignoré", type_key)
        return DragOutcome.unresolvable(tree)

    if destination.category is ZoneCategory.CANVAS:
        result = insert_block(tree, block, None, destination_index)
    else:
        target = resolve_zone(tree, destination)
        if target is None:
            return DragOutcome.unresolvable(tree)
        result = insert_block(tree, block, target.owner_id, destination_index, target.zone_id)

    if not result.found:
        return DragOutcome.unresolvable(tree)
    return _applied(result.tree, block.id, "settings")


# ── 3 : canvas → canvas ─────────────────────────────────────────────────────

def reorder_canvas(tree: Tree, source_index: int, destination_index: int, dragged_id: str) -> DragOutcome:
    position = _locate([block.id for block in tree], source_index, dragged_id)
    if position is None:
        return DragOutcome.unresolvable(tree)

    remaining = tree[:position] + tree[position + 1:]
    target = zone_map.clamp_index(destination_index, len(remaining))
    if target == position:
        return DragOutcome.noop(tree)

    remaining.insert(target, tree[position])
    return _applied(remaining, dragged_id, "settings")


# ── 4 : canvas → zone ───────────────────────────────────────────────────────

def move_canvas_to_zone(
    tree: Tree,
    source_index: int,
    destination: ZoneRef,
    destination_index: int,
    dragged_id: str,
) -> DragOutcome:
    position = _locate([block.id for block in tree], source_index, dragged_id)
    target = resolve_zone(tree, destination)
    if position is None or target is None:
        return DragOutcome.unresolvable(tree)

    block = tree[position]
    if contains(block, target.owner_id):
        log.debug("Drag refusé : %s ne peut pas entrer dans %s", block.id, target.owner_id)
        return DragOutcome.unresolvable(tree)

    remaining = tree[:position] + tree[position + 1:]
    result = insert_block(remaining, block, target.owner_id, destination_index, target.zone_id)
    if not result.found:
        return DragOutcome.unresolvable(tree)
    return _applied(result.tree, block.id, "settings")


# ── 5 : zone → canvas ───────────────────────────────────────────────────────

def move_zone_to_canvas(
    tree: Tree,
    source: ZoneRef,
    source_index: int,
    destination_index: int,
    dragged_id: str,
) -> DragOutcome:
    origin = resolve_zone(tree, source)
    position = _locate(origin.members, source_index, dragged_id) if origin else None
    if position is None:
        return DragOutcome.unresolvable(tree)

    detached, block = extract_block(tree, origin.members[position])
    result = insert_block(detached, block, None, destination_index)
    return _applied(result.tree, block.id, "settings")


# ── 6 : zone → zone ─────────────────────────────────────────────────────────

def _reorder_within(tree: Tree, origin: ResolvedZone, target: ResolvedZone,
                    position: int, block_id: str, destination_index: int) -> DragOutcome:
    """Déplacement à l'intérieur d'un même conteneur : children inchangés si multi-zones."""
    owner = origin.owner.block

    if origin.zone is None:
        children: List[Block] = list(owner.children)
        moved = children.pop(position)
        index = zone_map.clamp_index(destination_index, len(children))
        if index == position:
            return DragOutcome.noop(tree)
        children.insert(index, moved)
        return _applied(update_block(tree, owner.id, {"children": children}).tree, moved.id, "settings")

    if origin.zone_id == target.zone_id:
        index = zone_map.clamp_index(destination_index, len(origin.members) - 1)
        if index == position:
            return DragOutcome.noop(tree)

    settings = zone_map.move_member(owner.settings, origin.zones, block_id, target.zone_id, destination_index)
    return _applied(update_block(tree, owner.id, {"settings": settings}).tree, block_id, "settings")


def move_between_zones(
    tree: Tree,
    source: ZoneRef,
    source_index: int,
    destination: ZoneRef,
    destination_index: int,
    dragged_id: str,
) -> DragOutcome:
    origin = resolve_zone(tree, source)
    target = resolve_zone(tree, destination)
    position = _locate(origin.members, source_index, dragged_id) if origin else None
    if position is None or target is None:
        return DragOutcome.unresolvable(tree)

    block_id = origin.members[position]
    if target.owner_id == origin.owner_id:
        return _reorder_within(tree, origin, target, position, block_id, destination_index)

    block = next(child for child in origin.owner.block.children if child.id == block_id)
    if contains(block, target.owner_id):
        log.debug("Drag refusé : %s ne peut pas entrer dans %s", block_id, target.owner_id)
        return DragOutcome.unresolvable(tree)

    detached, block = extract_block(tree, block_id)
    result = insert_block(detached, block, target.owner_id, destination_index, target.zone_id)
    if not result.found:
        return DragOutcome.unresolvable(tree)
    return _applied(result.tree, block_id, "settings")
