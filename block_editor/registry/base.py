"""
Registry — contrat consommé par le moteur + catalogue concret de définitions.

Le moteur ne connaît que le contrat `BlockRegistry` :
    is_container(type_key) -> bool
    create_default(type_key, block_id) -> Block | None   (None = type inconnu)
Le registry est toujours passé explicitement, jamais lu dans un état global.
"""
import uuid
from typing import Any, Dict, Iterable, List, Literal, Optional, Protocol, runtime_checkable

from pydantic import BaseModel, Field

from ..core.schemas import Block, BlockContent, EmptyContent

BlockCategory = Literal["basic", "media", "layout", "advanced"]

BASE_STYLES: Dict[str, Any] = {
    "padding": "20px",
    "margin": "0px",
    "contentAlignHorizontal": "left",
    "contentAlignVertical": "top",
}


def new_block_id() -> str:
    """Générateur d'ids par défaut (uuid4)."""
    return str(uuid.uuid4())


@runtime_checkable
class BlockRegistry(Protocol):
    def is_container(self, type_key: str) -> bool: ...

    def create_default(self, type_key: str, block_id: str) -> Optional[Block]: ...


class BlockDefinition(BaseModel):
    """Définition d'un type de bloc : valeurs par défaut + nature conteneur."""
    name: str = Field(..., description="Clé de type (ex : core/heading)")
    label: str = ""
    description: str = ""
    category: BlockCategory = "basic"
    is_container: bool = False
    default_content: BlockContent = Field(default_factory=EmptyContent)
    default_styles: Dict[str, Any] = Field(default_factory=dict)
    default_settings: Dict[str, Any] = Field(default_factory=dict)

    def instantiate(self, block_id: str) -> Block:
        """Nouveau bloc par défaut ; aucune structure mutable partagée avec la définition."""
        defaults = self.model_copy(deep=True)
        return Block(
            id=block_id,
            name=self.name,
            label=self.label,
            kind="container" if self.is_container else "block",
            content=defaults.default_content,
            styles={**BASE_STYLES, **defaults.default_styles},
            settings=defaults.default_settings,
            children=[] if self.is_container else None,
        )


class BlockCatalog:
    """
    Registry concret : clé de type → BlockDefinition.

    Usage:
        >>> catalog = BlockCatalog([BlockDefinition(name="core/paragraph")])
        >>> catalog.create_default("core/paragraph", "b-1").id
        'b-1'
        >>> catalog.create_default("core/unknown", "b-2") is None
        True
    """

    def __init__(self, definitions: Iterable[BlockDefinition] = ()):
        self._definitions: Dict[str, BlockDefinition] = {}
        for definition in definitions:
            self._definitions[definition.name] = definition

    def get(self, type_key: str) -> Optional[BlockDefinition]:
        return self._definitions.get(type_key)

    def names(self) -> List[str]:
        return list(self._definitions)

    def definitions(self) -> List[BlockDefinition]:
        return list(self._definitions.values())

    def register(self, definition: BlockDefinition) -> "BlockCatalog":
        """Retourne un nouveau catalogue incluant `definition` (remplace la clé existante)."""
        return BlockCatalog([*self.definitions(), definition])

    def is_container(self, type_key: str) -> bool:
        definition = self.get(type_key)
        return bool(definition and definition.is_container)

    def create_default(self, type_key: str, block_id: str) -> Optional[Block]:
        definition = self.get(type_key)
        if definition is None:
            return None
        return definition.instantiate(block_id)

    def __contains__(self, type_key: str) -> bool:
        return type_key in self._definitions

    def __len__(self) -> int:
        return len(self._definitions)
