"""
Lurky - RAG Engine
===================
Answers product questions in the user's own language from a catalog
indexed in one canonical language.

Architecture (OOP)
------------------
``LanguageNormalizer``
    Translates the question into the canonical retrieval language with
    a temperature-0 Gemini call.  Already-canonical text comes back
    verbatim.  Language detection is left to the model.

``assemble_context``
    Pure function joining retrieved fragments, in retrieval order, with
    a fixed separator.  Text-less fragments are dumped as JSON instead
    of being dropped.

``AnswerGenerator``
    Gemini call instructed to answer strictly from the context and in
    the language of the original question.  Neither constraint is
    verified after the fact.

``RAGManager``
    Stateless pipeline orchestrator.  Flow:
        1. Normalize   → canonical query
        2. Retrieve    → top-K fragments from Pinecone
        3. Empty?      → fixed bilingual fallback (no LLM call)
        4. Assemble    → context block
        5. Generate    → localized answer
    Any exception from any stage becomes a degraded ``AnswerResult``;
    ``ask`` itself never raises and never retries.

Usage:
    from lurky.src.core.rag_engine import RAGManager
    rag = RAGManager()
    result = await rag.ask("Lurky连帽衫有什么颜色？")
"""

from __future__ import annotations

import time
from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from langchain_core.output_parsers import StrOutputParser
from langchain_core.prompts import ChatPromptTemplate
from langchain_core.runnables import Runnable

from lurky.config.prompt_templates import ANSWER_PROMPT_TEMPLATE, CONTEXT_SEPARATOR, NO_INFORMATION_RESPONSE, SYSTEM_ERROR_RESPONSE, TRANSLATION_PROMPT_TEMPLATE
from lurky.config.settings import settings
from lurky.src.core.exceptions import GenerationError
from lurky.src.core.models import AnswerResult, ContextFragment, PipelineStage
from lurky.src.utils.logger import get_logger
from lurky.src.utils.text_utils import clean_generation_output, dump_fields, preview

logger = get_logger(__name__)


# ══════════════════════════════════════════════════════════════════════
#  COLLABORATOR PROTOCOLS
# ══════════════════════════════════════════════════════════════════════


@runtime_checkable
class Retriever(Protocol):
    """Anything that can return ranked fragments for a canonical query."""

    async def retrieve(self, query: str, partition: str | None = None, top_k: int | None = None) -> list[ContextFragment]: ...

    async def warm_up(self) -> None: ...


def _init_llm(temperature: float) -> Runnable:
    """Initialise a Gemini chat model via LangChain."""
    from langchain_google_genai import ChatGoogleGenerativeAI

    llm = ChatGoogleGenerativeAI(model=settings.LLM_MODEL, temperature=temperature, google_api_key=settings.GOOGLE_API_KEY.get_secret_value())
    logger.info("LLM initialised: %s (temperature=%.1f)", settings.LLM_MODEL, temperature)
    return llm


# ══════════════════════════════════════════════════════════════════════
#  LANGUAGE NORMALIZER
# ══════════════════════════════════════════════════════════════════════


class LanguageNormalizer:
    """
    Translate arbitrary-language text into the canonical language.

    Parameters
    ----------
    llm
        Chat model (any LangChain ``Runnable``).  Defaults to Gemini at
        ``settings.TRANSLATION_TEMPERATURE``.
    language
        Target language.  Defaults to ``settings.CANONICAL_LANGUAGE``.
    strict
        When true, a failed translation raises ``GenerationError``.
        Otherwise the trimmed input is used as the query.
    """

    __slots__ = ("_chain", "_language", "_strict")

    def __init__(self, llm: Runnable | None = None, language: str | None = None, strict: bool | None = None) -> None:
        self._language: str = language or settings.CANONICAL_LANGUAGE
        self._strict: bool = settings.STRICT_TRANSLATION if strict is None else strict
        model = llm if llm is not None else _init_llm(settings.TRANSLATION_TEMPERATURE)
        self._chain = ChatPromptTemplate.from_template(TRANSLATION_PROMPT_TEMPLATE) | model | StrOutputParser()

    @property
    def language(self) -> str:
        return self._language


    async def normalize(self, text: str) -> str:
        """Return *text* expressed in the canonical language, trimmed."""
        try:
            translated = clean_generation_output(await self._chain.ainvoke({"language": self._language, "text": text}))
        except Exception as exc:
            if self._strict:
                raise GenerationError(f"Translation failed: {exc}") from exc
            logger.warning("[NORMALIZE] Translation failed, searching with the original text: %s", exc)
            return text.strip()

        if not translated:
            logger.warning("[NORMALIZE] Empty translation, searching with the original text.")
            return text.strip()

        logger.info("[NORMALIZE] '%s' → '%s'", preview(text), preview(translated))
        return translated


# ══════════════════════════════════════════════════════════════════════
#  CONTEXT ASSEMBLY
# ══════════════════════════════════════════════════════════════════════


def assemble_context(fragments: Sequence[ContextFragment]) -> str:
    """Join fragment texts in the given order; text-less fragments are dumped as JSON."""
    return CONTEXT_SEPARATOR.join(fragment.text or dump_fields(fragment.fields) for fragment in fragments)


# ══════════════════════════════════════════════════════════════════════
#  ANSWER GENERATOR
# ══════════════════════════════════════════════════════════════════════


class AnswerGenerator:
    """
    Produce a grounded answer in the language of the original question.

    Parameters
    ----------
    llm
        Chat model (any LangChain ``Runnable``).  Defaults to Gemini at
        ``settings.ANSWER_TEMPERATURE``.
    """

    __slots__ = ("_chain", "_language")

    def __init__(self, llm: Runnable | None = None, language: str | None = None) -> None:
        self._language: str = language or settings.CANONICAL_LANGUAGE
        model = llm if llm is not None else _init_llm(settings.ANSWER_TEMPERATURE)
        self._chain = ChatPromptTemplate.from_template(ANSWER_PROMPT_TEMPLATE) | model | StrOutputParser()


    async def generate(self, context: str, canonical_query: str, original_question: str) -> str:
        """
        Answer *original_question* from *context*.

        Raises
        ------
        GenerationError
            If the model call fails.
        """
        slots = {
            "bot_name": settings.BOT_NAME,
            "brand_name": settings.BRAND_NAME,
            "context": context,
            "canonical_language": self._language,
            "canonical_question": canonical_query,
            "original_question": original_question,
        }
        try:
            answer = await self._chain.ainvoke(slots)
        except Exception as exc:
            raise GenerationError(f"Answer generation failed: {exc}") from exc
        return clean_generation_output(answer)


# ══════════════════════════════════════════════════════════════════════
#  RAG MANAGER
# ══════════════════════════════════════════════════════════════════════


class RAGManager:
    """
    Orchestrates normalize → retrieve → assemble → generate.

    Parameters
    ----------
    normalizer
        Optional custom ``LanguageNormalizer``.
    retriever
        Optional ``Retriever``; defaults to ``PineconeRetriever``.
    generator
        Optional custom ``AnswerGenerator``.
    """

    __slots__ = ("_normalizer", "_retriever", "_generator")

    def __init__(self, normalizer: LanguageNormalizer | None = None, retriever: Retriever | None = None, generator: AnswerGenerator | None = None) -> None:
        if retriever is None:
            from lurky.src.database.vector_store import PineconeRetriever

            retriever = PineconeRetriever()
        self._normalizer = normalizer or LanguageNormalizer()
        self._retriever = retriever
        self._generator = generator or AnswerGenerator()


    async def warm_up(self) -> None:
        """Resolve external endpoints before the first request."""
        await self._retriever.warm_up()


    async def ask(self, question: str) -> AnswerResult:
        """
        Answer *question*.  Never raises.

        Returns
        -------
        AnswerResult
            On success ``error`` is ``None``.  With no matching fragments
            ``answer`` is ``NO_INFORMATION_RESPONSE``.  On any failure
            ``answer`` is ``SYSTEM_ERROR_RESPONSE`` and ``error`` holds the
            exception text.
        """
        t_start = time.perf_counter()
        stage = PipelineStage.START
        canonical_query: str | None = None

        try:
            # ── 1. Normalize ─────────────────────────────────────────
            t_stage = time.perf_counter()
            canonical_query = await self._normalizer.normalize(question)
            stage = PipelineStage.NORMALIZED
            normalize_ms = (time.perf_counter() - t_stage) * 1000
            logger.info("[RAG] Original question: '%s'", preview(question))
            logger.info("[RAG] Query used for retrieval: '%s'", preview(canonical_query))

            # ── 2. Retrieve ──────────────────────────────────────────
            t_stage = time.perf_counter()
            fragments = await self._retriever.retrieve(canonical_query)
            stage = PipelineStage.RETRIEVED
            search_ms = (time.perf_counter() - t_stage) * 1000

            # ── 3. Empty result → fixed fallback ─────────────────────
            if not fragments:
                stage = PipelineStage.EMPTY_RESULT
                logger.warning("[RAG] No relevant fragments; returning fallback answer.")
                return AnswerResult(original_question=question, canonical_query=canonical_query, answer=NO_INFORMATION_RESPONSE)

            # ── 4. Assemble ──────────────────────────────────────────
            context = assemble_context(fragments)
            stage = PipelineStage.ASSEMBLED
            logger.debug("[RAG] Context assembled from %d fragment(s), %d chars.", len(fragments), len(context))

            # ── 5. Generate ──────────────────────────────────────────
            t_stage = time.perf_counter()
            answer = await self._generator.generate(context, canonical_query, question)
            stage = PipelineStage.GENERATED
            llm_ms = (time.perf_counter() - t_stage) * 1000

        except Exception as exc:
            logger.exception("[RAG] Pipeline %s after stage %s.", PipelineStage.FAILED.value, stage.value)
            return AnswerResult(original_question=question, canonical_query=canonical_query, answer=SYSTEM_ERROR_RESPONSE, error=str(exc) or exc.__class__.__name__)

        total_ms = (time.perf_counter() - t_start) * 1000
        logger.info("[RAG] %s in %.1fms (normalize=%.1f, search=%.1f, llm=%.1f)", PipelineStage.DONE.value, total_ms, normalize_ms, search_ms, llm_ms)
        return AnswerResult(original_question=question, canonical_query=canonical_query, answer=answer)
