"""
Router FastAPI — endpoints sans état autour du moteur d'édition.

GET  /block-editor/catalog    → définitions de blocs + JSON schema du Block
POST /block-editor/drag       → {blocks, gesture} → arbre résultant + hints
POST /block-editor/update     → {blocks, block_id, patch} → {blocks, found} (422 si patch invalide)
POST /block-editor/remove     → {blocks, block_id} → {blocks, found}
POST /block-editor/duplicate  → {blocks, block_id} → {blocks, found, new_block_id}
POST /block-editor/validate   → {blocks} → {valid, problems}
POST /block-editor/migrate    → {blocks} → {blocks} (encodages historiques convertis)

L'arbre voyage dans chaque requête : la persistance reste à l'appelant.
"""
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, ValidationError

from .core.schemas import Block, Tree
from .dnd import DragGesture, resolve_drag
from .migration import migrate_legacy_columns
from .registry import BlockCatalog, BlockRegistry, default_catalog, new_block_id
from .tree import duplicate_block, remove_block, update_block, validate_tree

router = APIRouter(prefix="/block-editor", tags=["block_editor"])


def get_registry() -> BlockCatalog:
    """Dépendance surchargeable (app.dependency_overrides) pour injecter un autre registry."""
    return default_catalog()


def _dump(tree: Tree) -> List[Dict[str, Any]]:
    return [block.model_dump() for block in tree]


class TreeRequest(BaseModel):
    blocks: List[Block] = Field(default_factory=list)


class BlockRequest(TreeRequest):
    block_id: str


class UpdateRequest(BlockRequest):
    patch: Dict[str, Any] = Field(default_factory=dict)


class DragRequest(TreeRequest):
    gesture: DragGesture


@router.get("/catalog", summary="Liste les types de blocs et le schema Block")
def catalog(registry: BlockCatalog = Depends(get_registry)) -> JSONResponse:
    return JSONResponse({
        "blocks": [definition.model_dump() for definition in registry.definitions()],
        "schema": Block.model_json_schema(),
    })


@router.post("/drag", summary="Applique un geste de drag-and-drop")
def drag(body: DragRequest, registry: BlockRegistry = Depends(get_registry)) -> dict:
    outcome = resolve_drag(body.blocks, body.gesture, registry, new_block_id)
    return {
        "blocks": _dump(outcome.tree),
        "status": outcome.status.value,
        "changed": outcome.changed,
        "select_block_id": outcome.select_block_id,
        "focus_panel": outcome.focus_panel,
    }


@router.post("/update", summary="Fusionne un patch dans un bloc")
def update(body: UpdateRequest) -> dict:
    try:
        result = update_block(body.blocks, body.block_id, body.patch)
    except (ValidationError, ValueError) as e:
        raise HTTPException(status_code=422, detail=f"Patch invalide : {e}")
    return {"blocks": _dump(result.tree), "found": result.found}


@router.post("/remove", summary="Supprime un bloc et son sous-arbre")
def remove(body: BlockRequest) -> dict:
    result = remove_block(body.blocks, body.block_id)
    return {"blocks": _dump(result.tree), "found": result.found}


@router.post("/duplicate", summary="Duplique un bloc juste après l'original")
def duplicate(body: BlockRequest) -> dict:
    result = duplicate_block(body.blocks, body.block_id, new_block_id)
    return {"blocks": _dump(result.tree), "found": result.found, "new_block_id": result.new_root_id}


@router.post("/validate", summary="Vérifie les invariants structurels d'un arbre")
def validate(body: TreeRequest) -> dict:
    problems = validate_tree(body.blocks)
    return {"valid": not problems, "problems": problems}


@router.post("/migrate", summary="Convertit les encodages historiques du bloc colonnes")
def migrate(body: TreeRequest) -> dict:
    try:
        migrated = migrate_legacy_columns(body.blocks)
    except (ValidationError, ValueError) as e:
        raise HTTPException(status_code=422, detail=f"Encodage historique illisible : {e}")
    return {"blocks": _dump(migrated)}
