"""
Registry des types de blocs — contrat + catalogue core/*.
"""
from .base import BASE_STYLES, BlockCatalog, BlockCategory, BlockDefinition, BlockRegistry, new_block_id
from .core_blocks import CORE_BLOCKS


def default_catalog() -> BlockCatalog:
    """Catalogue des blocs core/* (nouvelle instance à chaque appel)."""
    return BlockCatalog(CORE_BLOCKS)


__all__ = [
    "BASE_STYLES",
    "BlockCatalog",
    "BlockCategory",
    "BlockDefinition",
    "BlockRegistry",
    "CORE_BLOCKS",
    "default_catalog",
    "new_block_id",
]
