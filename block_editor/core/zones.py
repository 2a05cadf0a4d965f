"""
Zone map — lecture, validation et réécriture de la répartition des enfants
d'un conteneur multi-zones (colonnes).

La zone map vit dans `settings["zones"]` sous forme de dicts sérialisés
`{"zone_id", "width", "block_ids"}`. Toutes les fonctions d'écriture renvoient
un nouveau dict settings ; le dict d'origine n'est jamais modifié.

Une zone map incohérente (id orphelin, doublon, enfant absent) est ignorée par
`read_zones` : le conteneur est alors traité comme single-zone.
"""
import logging
from typing import Any, Dict, List, Mapping, Optional

from pydantic import ValidationError

from .schemas import Block, Zone

log = logging.getLogger(__name__)

ZONES_KEY = "zones"


def _parse(raw: Any) -> Optional[List[Zone]]:
    if not isinstance(raw, list):
        return None
    try:
        return [Zone.model_validate(entry) for entry in raw]
    except ValidationError:
        return None


def _entry_dict(entry: Any) -> Any:
    return entry.model_dump() if isinstance(entry, Zone) else entry


def read_zones(block: Block) -> Optional[List[Zone]]:
    """
    Retourne la zone map validée d'un conteneur, ou None.

    None signifie : pas un conteneur, conteneur single-zone, ou zone map
    incohérente avec `children` (repli single-zone).
    """
    if not block.is_container or ZONES_KEY not in block.settings:
        return None

    zones = _parse(block.settings[ZONES_KEY])
    if zones is None:
        log.debug("Zone map illisible pour %s — repli single-zone", block.id)
        return None

    members = [bid for zone in zones for bid in zone.block_ids]
    child_ids = [child.id for child in block.children or []]
    zone_ids = [zone.zone_id for zone in zones]
    if (len(members) != len(set(members))
            or len(zone_ids) != len(set(zone_ids))
            or sorted(members) != sorted(child_ids)):
        log.debug("Zone map incohérente pour %s — repli single-zone", block.id)
        return None
    return zones


def is_multi_zone(block: Block) -> bool:
    return read_zones(block) is not None


def has_zone_map(block: Block) -> bool:
    """True si le conteneur déclare une zone map, valide ou non."""
    return block.is_container and ZONES_KEY in block.settings


def find_zone(zones: List[Zone], zone_id: str) -> Optional[Zone]:
    for zone in zones:
        if zone.zone_id == zone_id:
            return zone
    return None


def zone_of(zones: List[Zone], block_id: str) -> Optional[Zone]:
    """Zone qui contient `block_id`."""
    for zone in zones:
        if block_id in zone.block_ids:
            return zone
    return None


def write_zones(settings: Mapping[str, Any], zones: List[Zone]) -> Dict[str, Any]:
    return {**settings, ZONES_KEY: [zone.model_dump() for zone in zones]}


def insert_member(
    settings: Mapping[str, Any],
    zones: List[Zone],
    zone_id: str,
    index: Optional[int],
    block_id: str,
) -> Dict[str, Any]:
    """Insère `block_id` dans la zone `zone_id` à la position `index` (bornée)."""
    rewritten = []
    for zone in zones:
        if zone.zone_id == zone_id:
            members = list(zone.block_ids)
            members.insert(clamp_index(index, len(members)), block_id)
            zone = zone.model_copy(update={"block_ids": members})
        rewritten.append(zone)
    return write_zones(settings, rewritten)


def move_member(
    settings: Mapping[str, Any],
    zones: List[Zone],
    block_id: str,
    zone_id: str,
    index: Optional[int],
) -> Dict[str, Any]:
    """Retire `block_id` de sa zone puis l'insère dans `zone_id` (index post-retrait)."""
    stripped = [
        zone.model_copy(update={"block_ids": [b for b in zone.block_ids if b != block_id]})
        for zone in zones
    ]
    return insert_member(settings, stripped, zone_id, index, block_id)


def insert_after(settings: Mapping[str, Any], anchor_id: str, block_id: str) -> Optional[Dict[str, Any]]:
    """Insère `block_id` juste après `anchor_id`, dans la même zone. None si anchor absent."""
    zones = _parse(settings.get(ZONES_KEY))
    if zones is None:
        return None
    host = zone_of(zones, anchor_id)
    if host is None:
        return None
    position = host.block_ids.index(anchor_id) + 1
    return insert_member(settings, zones, host.zone_id, position, block_id)


def purge_member(settings: Mapping[str, Any], block_id: str) -> Optional[Dict[str, Any]]:
    """
    Retire `block_id` de toutes les zones où il apparaît.

    Travaille sur les entrées brutes pour fonctionner aussi sur une zone map
    incohérente. None si rien n'a changé.
    """
    raw = settings.get(ZONES_KEY)
    if not isinstance(raw, list):
        return None

    changed = False
    entries = []
    for entry in raw:
        entry = _entry_dict(entry)
        if isinstance(entry, dict) and block_id in (entry.get("block_ids") or []):
            entry = {**entry, "block_ids": [b for b in entry["block_ids"] if b != block_id]}
            changed = True
        entries.append(entry)
    return {**settings, ZONES_KEY: entries} if changed else None


def reconcile_members(settings: Mapping[str, Any], child_ids: List[str]) -> Optional[Dict[str, Any]]:
    """
    Aligne la zone map sur `child_ids` : ids absents des enfants et doublons
    retirés, enfants hors zone ajoutés à la dernière zone (`col-1` créée s'il
    n'y en a aucune). None si settings ne porte pas de zone map.
    """
    raw = settings.get(ZONES_KEY)
    if not isinstance(raw, list):
        return None

    known = set(child_ids)
    seen = set()
    entries = []
    for entry in raw:
        entry = _entry_dict(entry)
        if not isinstance(entry, dict):
            continue
        ids = entry.get("block_ids")
        members = []
        for block_id in ids if isinstance(ids, list) else []:
            if isinstance(block_id, str) and block_id in known and block_id not in seen:
                members.append(block_id)
                seen.add(block_id)
        entries.append({**entry, "block_ids": members})

    orphans = [child_id for child_id in child_ids if child_id not in seen]
    if orphans:
        if not entries:
            entries.append(Zone(zone_id="col-1").model_dump())
        entries[-1]["block_ids"].extend(orphans)
    return {**settings, ZONES_KEY: entries}


def remap_members(settings: Mapping[str, Any], mapping: Mapping[str, str]) -> Optional[Dict[str, Any]]:
    """Substitue les ids des zones via `mapping` (ancien id → nouvel id)."""
    raw = settings.get(ZONES_KEY)
    if not isinstance(raw, list):
        return None

    entries = []
    for entry in raw:
        entry = _entry_dict(entry)
        if isinstance(entry, dict) and isinstance(entry.get("block_ids"), list):
            entry = {**entry, "block_ids": [mapping.get(b, b) for b in entry["block_ids"]]}
        entries.append(entry)
    return {**settings, ZONES_KEY: entries}


def clamp_index(index: Optional[int], length: int) -> int:
    """Borne un index d'insertion dans [0, length] ; None = en fin de liste."""
    if index is None or index > length:
        return length
    return max(index, 0)
