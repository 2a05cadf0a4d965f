"""
Configuration — lue depuis l'environnement au chargement du module.

BLOCK_EDITOR_HISTORY_LIMIT : nombre max de snapshots conservés (défaut 50)
BLOCK_EDITOR_LOG_LEVEL     : niveau de log de configure_logging() (défaut INFO)

Une valeur illisible est ignorée avec un warning : le défaut s'applique.
"""
import logging
import os
from typing import Optional

from pydantic import BaseModel, Field

log = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 50
DEFAULT_LOG_LEVEL = "INFO"


class EditorSettings(BaseModel):
    history_limit: int = Field(default=DEFAULT_HISTORY_LIMIT, ge=1)
    log_level: str = DEFAULT_LOG_LEVEL


def _history_limit() -> int:
    raw = os.getenv("BLOCK_EDITOR_HISTORY_LIMIT")
    if raw is None:
        return DEFAULT_HISTORY_LIMIT
    try:
        limit = int(raw)
    except ValueError:
        limit = 0
    if limit < 1:
        log.warning("BLOCK_EDITOR_HISTORY_LIMIT invalide (%r) : %d utilisé", raw, DEFAULT_HISTORY_LIMIT)
        return DEFAULT_HISTORY_LIMIT
    return limit


def _log_level() -> str:
    level = os.getenv("BLOCK_EDITOR_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
    if not isinstance(logging.getLevelName(level), int):
        log.warning("BLOCK_EDITOR_LOG_LEVEL inconnu (%r) : %s utilisé", level, DEFAULT_LOG_LEVEL)
        return DEFAULT_LOG_LEVEL
    return level


def load_settings() -> EditorSettings:
    """Relit les variables d'environnement (utile en test)."""
    return EditorSettings(history_limit=_history_limit(), log_level=_log_level())


settings = load_settings()


def configure_logging(level: Optional[str] = None) -> None:
    logging.basicConfig(
        level=level or settings.log_level,
        format="%(asctime)s %(levelname)s — %(message)s",
    )
