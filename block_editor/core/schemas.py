"""
Schémas Pydantic du moteur d'édition.
Structure récursive : Tree (liste racine) → Block → children → Block ...

Block.content : union discriminée par `kind` (text, markdown, media, html, structured, empty)
Block.settings : métadonnées de layout, dont la zone map des conteneurs multi-zones
"""
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field, model_validator


# ── Contenu (union discriminée) ──────────────────────────────────────────────

TextAlign = Literal["left", "center", "right", "justify"]


class TextContent(BaseModel):
    """Texte brut (heading, paragraph, button, list, quote…)."""
    kind: Literal["text"] = "text"
    value: str = ""
    text_align: Optional[TextAlign] = None
    level: Optional[int] = Field(default=None, ge=1, le=6)  # heading uniquement
    anchor: Optional[str] = None
    link: Optional[str] = None
    target: Optional[str] = None
    ordered: Optional[bool] = None
    citation: Optional[str] = None
    drop_cap: bool = False


class MarkdownContent(BaseModel):
    kind: Literal["markdown"] = "markdown"
    value: str = ""
    text_align: Optional[TextAlign] = None


class MediaContent(BaseModel):
    """Média référencé par URL (image, vidéo, audio, fichier)."""
    kind: Literal["media"] = "media"
    url: str = ""
    media_type: Literal["image", "video", "audio", "file"] = "image"
    alt: str = ""
    caption: Optional[str] = None
    width: Optional[str] = None
    height: Optional[str] = None
    href: Optional[str] = None


class HtmlContent(BaseModel):
    kind: Literal["html"] = "html"
    value: str = ""
    sanitized: bool = False


class StructuredContent(BaseModel):
    """Configuration libre clé → valeur (columns, group, table, spacer…)."""
    kind: Literal["structured"] = "structured"
    data: Dict[str, Any] = Field(default_factory=dict)


class EmptyContent(BaseModel):
    kind: Literal["empty"] = "empty"


BlockContent = Annotated[
    Union[
        TextContent,
        MarkdownContent,
        MediaContent,
        HtmlContent,
        StructuredContent,
        EmptyContent,
    ],
    Field(discriminator="kind"),
]


# ── Zone map (conteneurs multi-zones) ────────────────────────────────────────

class Zone(BaseModel):
    """Sous-zone ordonnée d'un conteneur multi-zones (ex : une colonne)."""
    zone_id: str
    width: Optional[str] = None
    block_ids: List[str] = Field(default_factory=list)


# ── Block ────────────────────────────────────────────────────────────────────

BlockKind = Literal["block", "container"]


class Block(BaseModel):
    """
    Nœud de l'arbre de page.

    Un bloc `kind="block"` n'a jamais d'enfants ; un `kind="container"` porte
    toujours une liste `children` (éventuellement vide).
    L'id est unique dans tout l'arbre, pas seulement entre frères.
    """
    id: str
    name: str = Field(..., description="Clé de type canonique (ex : core/heading)")
    label: str = ""
    kind: BlockKind = "block"
    content: BlockContent = Field(default_factory=EmptyContent)
    styles: Dict[str, Any] = Field(default_factory=dict)
    settings: Dict[str, Any] = Field(default_factory=dict)
    children: Optional[List["Block"]] = None

    @model_validator(mode="after")
    def _check_children(self) -> "Block":
        if self.kind == "block" and self.children is not None:
            raise ValueError(f"Le bloc {self.id!r} n'est pas un conteneur : children interdit")
        if self.kind == "container" and self.children is None:
            self.children = []
        return self

    @property
    def is_container(self) -> bool:
        return self.kind == "container"


Block.model_rebuild()

# Liste racine (canvas), manipulée comme valeur : jamais modifiée en place
Tree = List[Block]
