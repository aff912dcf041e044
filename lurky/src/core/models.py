"""
Lurky - Request-Scoped Data Model
==================================
Value objects created and discarded within a single ``ask`` call.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class PipelineStage(str, Enum):
    """States a request moves through inside ``RAGManager.ask``."""

    START = "START"
    NORMALIZED = "NORMALIZED"
    RETRIEVED = "RETRIEVED"
    EMPTY_RESULT = "EMPTY_RESULT"
    ASSEMBLED = "ASSEMBLED"
    GENERATED = "GENERATED"
    FAILED = "FAILED"
    DONE = "DONE"


@dataclass(frozen=True)
class ContextFragment:
    """
    One retrieved unit of context.

    ``relevance_rank`` is the 1-based position in the index response;
    the index returns hits most relevant first.  ``text`` is ``None``
    when the record has no text field, in which case ``fields`` holds
    whatever the index did return.
    """

    id: str
    text: str | None
    relevance_rank: int
    fields: dict[str, object] = field(default_factory=dict)
    score: float | None = None


@dataclass(frozen=True)
class AnswerResult:
    """Terminal value of a request.  ``error`` is set only on failure."""

    original_question: str
    canonical_query: str | None
    answer: str
    error: str | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None


    def to_dict(self) -> dict[str, str | None]:
        """Transport shape; ``error`` is omitted on success."""
        payload: dict[str, str | None] = {"originalQuestion": self.original_question, "canonicalQuery": self.canonical_query, "answer": self.answer}
        if self.error is not None:
            payload["error"] = self.error
        return payload
