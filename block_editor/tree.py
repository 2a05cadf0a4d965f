"""
Tree locator / mutator — fonctions pures sur l'arbre de blocs.

Aucune fonction ne modifie son entrée : seuls les nœuds du chemin racine → cible
sont recopiés, les sous-arbres non touchés gardent leur identité (structural
sharing). "Introuvable" n'est jamais une exception : il est signalé par
`found=False` (ou None) et l'arbre d'origine est renvoyé tel quel.

Parcours : profondeur d'abord, pré-ordre, `children` dans l'ordre du tableau.
La zone map ne change pas l'ordre de parcours.
"""
import logging
from collections import Counter
from typing import Any, Callable, Dict, Iterator, List, Mapping, NamedTuple, Optional, Set, Tuple

from pydantic import TypeAdapter

from .core.schemas import Block, BlockContent, Tree
from .core import zones as zone_map

log = logging.getLogger(__name__)

IdGenerator = Callable[[], str]
Path = Tuple[int, ...]

_IMMUTABLE_FIELDS = ("id", "name")
_MAX_ID_ATTEMPTS = 100

_content_adapter = TypeAdapter(BlockContent)
_children_adapter = TypeAdapter(List[Block])


class BlockLocation(NamedTuple):
    block: Block
    path: Path


class MutationResult(NamedTuple):
    tree: Tree
    found: bool


class DuplicateResult(NamedTuple):
    tree: Tree
    found: bool
    new_root_id: Optional[str]


# ── Lecture ──────────────────────────────────────────────────────────────────

def walk(tree: Tree) -> Iterator[BlockLocation]:
    """Parcours pré-ordre de tout l'arbre, avec le chemin de chaque nœud."""
    def visit(blocks: List[Block], prefix: Path) -> Iterator[BlockLocation]:
        for index, block in enumerate(blocks):
            path = prefix + (index,)
            yield BlockLocation(block, path)
            if block.children:
                yield from visit(block.children, path)

    return visit(tree, ())


def iter_blocks(tree: Tree) -> Iterator[Block]:
    for location in walk(tree):
        yield location.block


def collect_ids(tree: Tree) -> List[str]:
    return [block.id for block in iter_blocks(tree)]


def find_block(tree: Tree, block_id: str) -> Optional[BlockLocation]:
    """Localise un bloc ; None s'il est absent."""
    for location in walk(tree):
        if location.block.id == block_id:
            return location
    return None


def block_at(tree: Tree, path: Path) -> Block:
    blocks = tree
    block = None
    for index in path:
        block = blocks[index]
        blocks = block.children or []
    if block is None:
        raise IndexError("Chemin vide")
    return block


def find_parent(tree: Tree, block_id: str) -> Optional[Block]:
    """Conteneur parent direct ; None pour un bloc racine ou absent."""
    location = find_block(tree, block_id)
    if location is None or len(location.path) == 1:
        return None
    return block_at(tree, location.path[:-1])


def contains(block: Block, block_id: str) -> bool:
    """True si `block_id` est `block` lui-même ou l'un de ses descendants."""
    return find_block([block], block_id) is not None


# ── Réécriture par chemin ────────────────────────────────────────────────────

def _replace_at(blocks: List[Block], path: Path, fn: Callable[[Block], Block]) -> List[Block]:
    """Remplace le nœud désigné par `path` par fn(nœud), en recopiant uniquement le chemin."""
    index, rest = path[0], path[1:]
    target = blocks[index]
    if rest:
        replacement = target.model_copy(update={"children": _replace_at(target.children, rest, fn)})
    else:
        replacement = fn(target)
    result = list(blocks)
    result[index] = replacement
    return result


EditFn = Callable[[List[Block], Optional[Block]], Tuple[List[Block], Optional[Dict[str, Any]]]]


def _edit_owner(tree: Tree, owner_path: Path, edit: EditFn) -> Tree:
    """
    Applique `edit(children, owner) -> (children', settings' | None)` au niveau
    `owner_path` : la liste racine si le chemin est vide, sinon les enfants du
    conteneur désigné.
    """
    if not owner_path:
        children, _ = edit(tree, None)
        return children

    def rewrite(owner: Block) -> Block:
        children, settings = edit(owner.children or [], owner)
        update: Dict[str, Any] = {"children": children}
        if settings is not None:
            update["settings"] = settings
        return owner.model_copy(update=update)

    return _replace_at(tree, owner_path, rewrite)


# ── Update ───────────────────────────────────────────────────────────────────

def _sanitize_patch(block: Block, patch: Mapping[str, Any]) -> Dict[str, Any]:
    changes: Dict[str, Any] = {}
    for key, value in patch.items():
        if key in _IMMUTABLE_FIELDS:
            if value != getattr(block, key):
                log.warning("Champ immuable %r ignoré pour le bloc %s", key, block.id)
            continue
        if key not in Block.model_fields:
            log.warning("Champ inconnu %r ignoré pour le bloc %s", key, block.id)
            continue
        if key == "content":
            value = _content_adapter.validate_python(value)
        elif key == "children" and value is not None:
            value = _children_adapter.validate_python(value)
        changes[key] = value

    kind = changes.get("kind", block.kind)
    children = changes.get("children", block.children)
    if kind == "block" and children:
        if "kind" in changes:
            log.warning("Le conteneur %s a des enfants : passage en bloc simple ignoré", block.id)
            changes.pop("kind")
            kind = block.kind
        else:
            log.warning("Le bloc simple %s ne peut pas recevoir d'enfants", block.id)
    if kind == "block":
        if "kind" in changes or "children" in changes:
            changes["children"] = None
    elif children is None:
        changes["children"] = []

    settings = changes.get("settings", block.settings)
    if kind == "container" and "children" in changes and isinstance(settings, Mapping):
        reconciled = zone_map.reconcile_members(settings, [child.id for child in changes["children"]])
        if reconciled is not None and reconciled != settings:
            log.debug("Zone map de %s alignée sur les nouveaux children", block.id)
            changes["settings"] = reconciled
    return changes


def update_block(tree: Tree, block_id: str, patch: Mapping[str, Any]) -> MutationResult:
    """
    Fusionne `patch` au premier niveau du bloc (pas de merge profond de
    content/styles/settings : l'appelant pré-fusionne s'il le souhaite).
    `id` et `name` sont immuables et ignorés.
    """
    location = find_block(tree, block_id)
    if location is None:
        return MutationResult(tree, False)

    changes = _sanitize_patch(location.block, patch)
    if not changes:
        return MutationResult(tree, True)
    updated = location.block.model_copy(update=changes)
    return MutationResult(_replace_at(tree, location.path, lambda _: updated), True)


# ── Remove / extract ─────────────────────────────────────────────────────────

def extract_block(tree: Tree, block_id: str) -> Tuple[Tree, Optional[Block]]:
    """Retire un bloc (et son sous-arbre) ; renvoie (nouvel arbre, bloc retiré)."""
    location = find_block(tree, block_id)
    if location is None:
        return tree, None

    owner_path, index = location.path[:-1], location.path[-1]

    def drop(children: List[Block], owner: Optional[Block]):
        remaining = children[:index] + children[index + 1:]
        settings = zone_map.purge_member(owner.settings, block_id) if owner is not None else None
        return remaining, settings

    return _edit_owner(tree, owner_path, drop), location.block


def remove_block(tree: Tree, block_id: str) -> MutationResult:
    """Supprime un bloc de son parent, zone map comprise. Retirer de l'arbre = détruire."""
    new_tree, removed = extract_block(tree, block_id)
    return MutationResult(new_tree, removed is not None)


# ── Duplicate ────────────────────────────────────────────────────────────────

def unique_id_source(id_generator: IdGenerator, taken: Set[str]) -> IdGenerator:
    """
    Enveloppe `id_generator` : n'émet que des ids absents de `taken`
    (et les y ajoute). Lève ValueError si le générateur ne produit que des collisions.
    """
    def next_id() -> str:
        for _ in range(_MAX_ID_ATTEMPTS):
            candidate = id_generator()
            if candidate not in taken:
                taken.add(candidate)
                return candidate
        raise ValueError(f"Générateur d'ids : aucun id libre après {_MAX_ID_ATTEMPTS} tentatives")

    return next_id


def _assign_fresh_ids(block: Block, next_id: IdGenerator) -> None:
    # `block` est une copie profonde privée : modification en place autorisée
    block.id = next_id()
    if not block.children:
        return
    old_ids = [child.id for child in block.children]
    for child in block.children:
        _assign_fresh_ids(child, next_id)
    mapping = {old: child.id for old, child in zip(old_ids, block.children)}
    settings = zone_map.remap_members(block.settings, mapping)
    if settings is not None:
        block.settings = settings


def clone_subtree(block: Block, next_id: IdGenerator) -> Block:
    """Copie profonde avec un id neuf pour chaque nœud (pré-ordre), zones remappées."""
    clone = block.model_copy(deep=True)
    _assign_fresh_ids(clone, next_id)
    return clone


def duplicate_block(tree: Tree, block_id: str, id_generator: IdGenerator) -> DuplicateResult:
    """
    Duplique le sous-arbre `block_id` juste après l'original (même zone si le
    parent est multi-zones). Tous les ids du clone sont neufs.
    """
    location = find_block(tree, block_id)
    if location is None:
        return DuplicateResult(tree, False, None)

    next_id = unique_id_source(id_generator, set(collect_ids(tree)))
    clone = clone_subtree(location.block, next_id)
    owner_path, index = location.path[:-1], location.path[-1]

    def place(children: List[Block], owner: Optional[Block]):
        result = list(children)
        result.insert(index + 1, clone)
        settings = None
        if owner is not None and zone_map.is_multi_zone(owner):
            settings = zone_map.insert_after(owner.settings, block_id, clone.id)
        return result, settings

    return DuplicateResult(_edit_owner(tree, owner_path, place), True, clone.id)


# ── Insert / move ────────────────────────────────────────────────────────────

def _attach(tree: Tree, block: Block, parent_id: Optional[str], index: Optional[int],
            zone_id: Optional[str]) -> MutationResult:
    if parent_id is None:
        result = list(tree)
        result.insert(zone_map.clamp_index(index, len(tree)), block)
        return MutationResult(result, True)

    location = find_block(tree, parent_id)
    if location is None or not location.block.is_container:
        return MutationResult(tree, False)

    owner = location.block
    zones = zone_map.read_zones(owner)
    if zones is None:
        # single-zone (ou zone map incohérente) : children est la zone
        children = list(owner.children or [])
        children.insert(zone_map.clamp_index(index, len(children)), block)
        updated = owner.model_copy(update={"children": children})
    else:
        target = zone_map.find_zone(zones, zone_id) if zone_id is not None else (zones[0] if zones else None)
        if target is None:
            return MutationResult(tree, False)
        settings = zone_map.insert_member(owner.settings, zones, target.zone_id, index, block.id)
        updated = owner.model_copy(update={"children": [*owner.children, block], "settings": settings})

    return MutationResult(_replace_at(tree, location.path, lambda _: updated), True)


def insert_block(
    tree: Tree,
    block: Block,
    parent_id: Optional[str] = None,
    index: Optional[int] = None,
    zone_id: Optional[str] = None,
) -> MutationResult:
    """
    Insère un bloc déjà construit à la racine (`parent_id=None`) ou dans un
    conteneur. Pour un conteneur multi-zones, le bloc rejoint `zone_id`
    (première zone par défaut) et est ajouté en fin de `children`.
    `index=None` = en fin ; sinon borné à [0, len].
    """
    clashes = set(collect_ids(tree)).intersection(collect_ids([block]))
    if clashes:
        log.warning("Insertion refusée : ids déjà présents dans l'arbre %s", sorted(clashes))
        return MutationResult(tree, False)
    return _attach(tree, block, parent_id, index, zone_id)


def move_block(
    tree: Tree,
    block_id: str,
    parent_id: Optional[str] = None,
    index: Optional[int] = None,
    zone_id: Optional[str] = None,
) -> MutationResult:
    """
    Déplace un bloc vers la racine ou un conteneur. `index` est la position
    dans la liste destination *après* retrait du bloc.
    Refuse de déplacer un conteneur dans lui-même ou un descendant.
    """
    location = find_block(tree, block_id)
    if location is None:
        return MutationResult(tree, False)
    if parent_id is not None and contains(location.block, parent_id):
        log.warning("Déplacement refusé : %s ne peut pas entrer dans %s", block_id, parent_id)
        return MutationResult(tree, False)

    detached, block = extract_block(tree, block_id)
    result = _attach(detached, block, parent_id, index, zone_id)
    if not result.found:
        return MutationResult(tree, False)
    return result


# ── Invariants ───────────────────────────────────────────────────────────────

def validate_tree(tree: Tree) -> List[str]:
    """Liste les violations d'invariants structurels ; liste vide = arbre valide."""
    problems = []

    counts = Counter(collect_ids(tree))
    for block_id, count in sorted(counts.items()):
        if count > 1:
            problems.append(f"id dupliqué : {block_id} ({count} occurrences)")

    for block in iter_blocks(tree):
        if block.kind == "block" and block.children is not None:
            problems.append(f"{block.id} : bloc simple avec children")
        if zone_map.has_zone_map(block) and not zone_map.is_multi_zone(block):
            problems.append(f"{block.id} : zone map incohérente avec children")
    return problems
