"""
lurky/src/api/routes.py: API Route Definitions

    POST /rag/ask  → answer a product question
    GET  /health   → liveness probe

Handlers are thin: they read the ``RAGManager`` from application state
and hand the question over.  Failures are already folded into the
``AnswerResult``, so ``/rag/ask`` always answers with HTTP 200.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel

from lurky.src.core.rag_engine import RAGManager

router = APIRouter()


class AskRequest(BaseModel):
    question: str


def get_rag_manager(request: Request) -> RAGManager:
    return request.app.state.rag


@router.post("/rag/ask")
async def ask(body: AskRequest, rag: RAGManager = Depends(get_rag_manager)) -> dict:
    result = await rag.ask(body.question)
    return result.to_dict()


@router.get("/health")
async def health_check() -> dict:
    return {"status": "ok"}
