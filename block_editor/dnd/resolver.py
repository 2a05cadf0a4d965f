"""
Resolver — un geste de drag-and-drop → exactement une mutation, ou un no-op.

Les deux zones sont d'abord classées (palette / canvas / zone) puis le couple
est dispatché vers l'un des six handlers. Un couple hors motif est ignoré
(statut UNRESOLVABLE, arbre d'entrée inchangé).
"""
import logging

from ..core.schemas import Tree
from ..registry import BlockRegistry, new_block_id
from ..tree import IdGenerator
from .gesture import DragGesture, DragOutcome, ZoneCategory, classify_zone
from .handlers import (
    add_from_palette,
    move_between_zones,
    move_canvas_to_zone,
    move_zone_to_canvas,
    reorder_canvas,
)

log = logging.getLogger(__name__)

PALETTE = ZoneCategory.PALETTE
CANVAS = ZoneCategory.CANVAS
ZONE = ZoneCategory.ZONE


def resolve_drag(
    tree: Tree,
    gesture: DragGesture,
    registry: BlockRegistry,
    id_generator: IdGenerator = new_block_id,
) -> DragOutcome:
    """
    Point d'entrée unique du resolver.

    Args:
        tree: Arbre courant (jamais modifié)
        gesture: Fin de drag rapportée par la vue
        registry: Registry utilisé pour instancier les blocs tirés de la palette
        id_generator: Générateur d'ids des nouveaux blocs

    Returns:
        DragOutcome — nouvel arbre + hints de sélection si APPLIED,
        sinon l'arbre d'entrée (même référence)
    """
    if gesture.destination_zone is None:
        log.debug("Drag de %s lâché hors zone", gesture.dragged_id)
        return DragOutcome.noop(tree)

    source = classify_zone(gesture.source_zone)
    destination = classify_zone(gesture.destination_zone)
    if source is None or destination is None:
        log.debug("Zones non reconnues %r → %r : drag ignoré",
                  gesture.source_zone, gesture.destination_zone)
        return DragOutcome.unresolvable(tree)

    route = (source.category, destination.category)
    if route in ((PALETTE, CANVAS), (PALETTE, ZONE)):
        outcome = add_from_palette(tree, destination, gesture.destination_index,
                                   gesture.dragged_id, registry, id_generator)
    elif route == (CANVAS, CANVAS):
        outcome = reorder_canvas(tree, gesture.source_index, gesture.destination_index,
                                 gesture.dragged_id)
    elif route == (CANVAS, ZONE):
        outcome = move_canvas_to_zone(tree, gesture.source_index, destination,
                                      gesture.destination_index, gesture.dragged_id)
    elif route == (ZONE, CANVAS):
        outcome = move_zone_to_canvas(tree, source, gesture.source_index,
                                      gesture.destination_index, gesture.dragged_id)
    elif route == (ZONE, ZONE):
        outcome = move_between_zones(tree, source, gesture.source_index, destination,
                                     gesture.destination_index, gesture.dragged_id)
    else:
        log.debug("Motif de drag non géré %s → %s", source.category.value, destination.category.value)
        return DragOutcome.unresolvable(tree)

    log.debug("Drag %s %s → %s : %s", gesture.dragged_id, gesture.source_zone,
              gesture.destination_zone, outcome.status.value)
    return outcome
