"""
lurky/src/main.py: Application Entry Point

FastAPI application factory.  The lifespan handler builds the
``RAGManager`` once and resolves the Pinecone index host before the
first request; if that lookup fails the service still starts and the
host is resolved lazily later.

Run locally:
    uvicorn lurky.src.main:app --reload --port 8000
"""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from lurky.src.api.routes import router
from lurky.src.core.rag_engine import RAGManager
from lurky.src.utils.logger import get_logger

logger = get_logger(__name__)


def create_app(rag_manager: RAGManager | None = None) -> FastAPI:
    """Build the API.  Pass *rag_manager* to bypass the default Gemini/Pinecone wiring."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Lurky backend starting up…")
        rag = rag_manager or RAGManager()
        await rag.warm_up()
        app.state.rag = rag
        logger.info("All components initialised. Ready.")
        yield
        logger.info("Lurky backend shutting down.")

    app = FastAPI(title="Lurky Product Assistant", description="Cross-lingual RAG over the Lurky product catalog.", version="0.1.0", lifespan=lifespan)
    app.include_router(router)
    return app


app = create_app()
