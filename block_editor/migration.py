"""
Migration des encodages historiques du bloc colonnes vers l'encodage canonique
(children à plat + `settings["zones"]`). À appliquer à la frontière (chargement
d'une page), jamais à l'intérieur du moteur.

Encodages historiques reconnus :
  - colonnes imbriquées : content.data.columns = [{id, width, children|blocks}]
  - layout camelCase   : settings.columnLayout = [{columnId, width, blockIds}]
"""
import logging
from typing import Any, List, Optional

from .core.schemas import Block, StructuredContent, Tree, Zone
from .core.zones import ZONES_KEY, has_zone_map, is_multi_zone, reconcile_members, write_zones

log = logging.getLogger(__name__)

LEGACY_LAYOUT_KEY = "columnLayout"


def _width(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def _nested_columns(block: Block) -> Optional[List[dict]]:
    if not isinstance(block.content, StructuredContent):
        return None
    columns = block.content.data.get("columns")
    if not isinstance(columns, list) or not columns:
        return None
    if not all(isinstance(c, dict) and ("children" in c or "blocks" in c) for c in columns):
        return None
    return columns


def _flatten_nested_columns(block: Block, columns: List[dict]) -> Block:
    children = list(block.children or [])
    zones = []
    for position, column in enumerate(columns, start=1):
        nested = column.get("children") or column.get("blocks") or []
        members = migrate_legacy_columns([Block.model_validate(raw) for raw in nested])
        children.extend(members)
        zones.append(Zone(
            zone_id=str(column.get("id") or f"col-{position}"),
            width=_width(column.get("width")),
            block_ids=[member.id for member in members],
        ))

    data = {key: value for key, value in block.content.data.items() if key != "columns"}
    return block.model_copy(update={
        "kind": "container",
        "children": children,
        "content": StructuredContent(data=data),
        "settings": write_zones(block.settings, zones),
    })


def _rename_layout(block: Block) -> Block:
    entries = block.settings.get(LEGACY_LAYOUT_KEY)
    zones = [
        Zone(
            zone_id=str(entry.get("columnId") or f"col-{position}"),
            width=_width(entry.get("width")),
            block_ids=list(entry.get("blockIds") or []),
        )
        for position, entry in enumerate(entries if isinstance(entries, list) else [], start=1)
        if isinstance(entry, dict)
    ]
    settings = {key: value for key, value in block.settings.items() if key != LEGACY_LAYOUT_KEY}
    return block.model_copy(update={"settings": write_zones(settings, zones)})


def _migrate_block(block: Block) -> Block:
    migrated = block
    if block.children:
        children = migrate_legacy_columns(block.children)
        if children is not block.children:
            migrated = block.model_copy(update={"children": children})

    columns = _nested_columns(migrated)
    if columns is not None:
        migrated = repair_zones(_flatten_nested_columns(migrated, columns))
    elif LEGACY_LAYOUT_KEY in migrated.settings and ZONES_KEY not in migrated.settings:
        migrated = repair_zones(_rename_layout(migrated))

    if migrated is not block:
        log.info("Bloc %s migré vers l'encodage canonique", block.id)
    return migrated


def migrate_legacy_columns(tree: Tree) -> Tree:
    """
    Convertit récursivement les encodages historiques ; un arbre déjà canonique
    est renvoyé tel quel (même référence).
    """
    result = [_migrate_block(block) for block in tree]
    if all(new is old for new, old in zip(result, tree)):
        return tree
    return result


def repair_zones(block: Block) -> Block:
    """
    Répare une zone map incohérente : ids orphelins et doublons retirés, enfants
    hors zone ajoutés à la dernière zone. Bloc valide → renvoyé tel quel.
    """
    if not has_zone_map(block) or is_multi_zone(block):
        return block

    zones: List[Zone] = []
    raw = block.settings.get(ZONES_KEY)
    for position, entry in enumerate(raw if isinstance(raw, list) else [], start=1):
        if isinstance(entry, Zone):
            entry = entry.model_dump()
        if not isinstance(entry, dict):
            continue
        zone_id = str(entry.get("zone_id") or f"col-{position}")
        if any(zone.zone_id == zone_id for zone in zones):
            zone_id = f"{zone_id}-{position}"
        ids = entry.get("block_ids")
        members = [b for b in ids if isinstance(b, str)] if isinstance(ids, list) else []
        zones.append(Zone(zone_id=zone_id, width=_width(entry.get("width")), block_ids=members))

    child_ids = [child.id for child in block.children or []]
    settings = reconcile_members(write_zones(block.settings, zones), child_ids)
    log.info("Zone map réparée pour %s", block.id)
    return block.model_copy(update={"settings": settings})


def repair_tree(tree: Tree) -> Tree:
    """repair_zones appliqué à tous les conteneurs de l'arbre."""
    def repair(block: Block) -> Block:
        fixed = block
        if block.children:
            children = repair_tree(block.children)
            if children is not block.children:
                fixed = block.model_copy(update={"children": children})
        return repair_zones(fixed)

    result = [repair(block) for block in tree]
    if all(new is old for new, old in zip(result, tree)):
        return tree
    return result
