"""
BLOCK_EDITOR — FastAPI app
Démarrer : uvicorn block_editor.app:app --reload --port 8002
"""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import configure_logging, settings
from .router import router as block_editor_router

log = logging.getLogger(__name__)


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(title="Block Editor — moteur du page builder", version="1.0.0", docs_url="/docs")
    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])
    app.include_router(block_editor_router)

    @app.get("/health")
    def health():
        return {"status": "ok", "history_limit": settings.history_limit}

    log.info("Block editor prêt (historique : %d snapshots)", settings.history_limit)
    return app


app = create_app()
