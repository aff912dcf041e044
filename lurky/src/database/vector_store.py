"""
Lurky - Pinecone Retrieval
===========================
Read-only access to the product index hosted on Pinecone:
  • Index host resolution, cached per process in ``IndexEndpoint``
  • Semantic records search scoped to one namespace

Design decisions:
  • **Explicit endpoint state**: the resolved host lives in an
    ``IndexEndpoint`` object with ``resolve()`` (cached) and
    ``refresh()`` (always re-fetch).  It is never invalidated on a
    timer; an empty cache is filled on the next request.
  • **No lock around the host**: concurrent requests may both resolve
    an empty cache.  ``describe_index`` is idempotent, so the duplicate
    call is only a wasted round trip.
  • **Integrated-embedding search**: Pinecone embeds the query text
    server-side, so no embedder is needed here.  The search goes to the
    records endpoint of the index host over ``requests``.
  • **Blocking I/O off the event loop**: both the SDK call and the
    HTTP call run in ``asyncio.to_thread``.
  • **Dependency Injection**: the Pinecone client and the HTTP session
    are injected, making the retriever testable without network.

Usage:
    from lurky.src.database.vector_store import PineconeRetriever
    retriever = PineconeRetriever()
    fragments = await retriever.retrieve("What colors does the hoodie come in?")
"""

from __future__ import annotations

import asyncio
import threading
from typing import Protocol, runtime_checkable

import requests
from pinecone import Pinecone

from lurky.config.settings import settings
from lurky.src.core.exceptions import EndpointResolutionError, RetrievalError
from lurky.src.core.models import ContextFragment
from lurky.src.utils.logger import get_logger
from lurky.src.utils.text_utils import preview

logger = get_logger(__name__)

# ── Type Aliases ──────────────────────────────────────────────────────
SearchHit = dict[str, object]


# ── Index Describer Protocol ──────────────────────────────────────────

@runtime_checkable
class IndexDescriber(Protocol):
    """Anything exposing Pinecone's ``describe_index`` (the SDK client)."""

    def describe_index(self, name: str) -> object: ...


# ══════════════════════════════════════════════════════════════════════
#  INDEX ENDPOINT (process-scoped state)
# ══════════════════════════════════════════════════════════════════════


class IndexEndpoint:
    """
    Cached host address of a Pinecone index.

    Parameters
    ----------
    client
        A Pinecone SDK client (or any ``IndexDescriber``).
    index_name
        Index to describe.  Defaults to ``settings.PINECONE_INDEX``.
    """

    __slots__ = ("_client", "_index_name", "_host")

    def __init__(self, client: IndexDescriber, index_name: str | None = None) -> None:
        self._client = client
        self._index_name: str = index_name or settings.PINECONE_INDEX
        self._host: str | None = None

    @property
    def index_name(self) -> str:
        return self._index_name

    @property
    def host(self) -> str | None:
        """The cached host, or ``None`` if not resolved yet."""
        return self._host


    async def resolve(self) -> str:
        """Return the cached host, fetching it first if the cache is empty."""
        if self._host:
            return self._host
        return await self.refresh()


    async def refresh(self) -> str:
        """
        Look up the index host and replace the cached value.

        Raises
        ------
        EndpointResolutionError
            If the lookup fails or returns no host.  The previously
            cached value (if any) is left in place.
        """
        try:
            description = await asyncio.to_thread(self._client.describe_index, self._index_name)
        except Exception as exc:
            logger.error("[ENDPOINT] Failed to get Pinecone index host for '%s': %s", self._index_name, exc)
            raise EndpointResolutionError(f"Failed to resolve host for index '{self._index_name}': {exc}") from exc

        host = getattr(description, "host", None)
        if not host:
            logger.error("[ENDPOINT] Index '%s' description has no host.", self._index_name)
            raise EndpointResolutionError(f"Index '{self._index_name}' has no host")

        self._host = str(host)
        logger.info("[ENDPOINT] Pinecone index host found: %s", self._host)
        return self._host


    def __repr__(self) -> str:
        return f"IndexEndpoint(index='{self._index_name}', host={self._host!r})"


# ══════════════════════════════════════════════════════════════════════
#  PROCESS SINGLETONS
# ══════════════════════════════════════════════════════════════════════

_SINGLETON_LOCK = threading.Lock()
_pinecone_client: Pinecone | None = None
_index_endpoint: IndexEndpoint | None = None


def _get_pinecone_client() -> Pinecone:
    """Return (or create) the module-level Pinecone SDK client."""
    global _pinecone_client
    if _pinecone_client is None:
        with _SINGLETON_LOCK:
            if _pinecone_client is None:
                _pinecone_client = Pinecone(api_key=settings.PINECONE_API_KEY.get_secret_value())
                logger.info("Pinecone client created (singleton).")
    return _pinecone_client


def get_index_endpoint() -> IndexEndpoint:
    """Return the process-wide ``IndexEndpoint`` for ``settings.PINECONE_INDEX``."""
    global _index_endpoint
    if _index_endpoint is None:
        client = _get_pinecone_client()
        with _SINGLETON_LOCK:
            if _index_endpoint is None:
                _index_endpoint = IndexEndpoint(client)
    return _index_endpoint


# ══════════════════════════════════════════════════════════════════════
#  RETRIEVER
# ══════════════════════════════════════════════════════════════════════


class PineconeRetriever:
    """
    Top-K semantic search over one namespace of the product index.

    Parameters
    ----------
    endpoint
        Shared ``IndexEndpoint``.  Defaults to the process singleton.
    session
        ``requests.Session`` used for search calls.
    api_key
        Pinecone API key.  Defaults to ``settings.PINECONE_API_KEY``.
    namespace, top_k, text_field, api_version, timeout
        Overrides for the corresponding settings.
    """

    __slots__ = ("_endpoint", "_session", "_api_key", "_namespace", "_top_k", "_text_field", "_api_version", "_timeout")

    def __init__(self, endpoint: IndexEndpoint | None = None, session: requests.Session | None = None, api_key: str | None = None, namespace: str | None = None, top_k: int | None = None, text_field: str | None = None, api_version: str | None = None, timeout: float | None = None) -> None:
        self._endpoint = endpoint or get_index_endpoint()
        self._session = session or requests.Session()
        self._api_key: str = api_key or settings.PINECONE_API_KEY.get_secret_value()
        self._namespace: str = namespace or settings.PINECONE_NAMESPACE
        self._top_k: int = top_k or settings.SEARCH_TOP_K
        self._text_field: str = text_field or settings.PINECONE_TEXT_FIELD
        self._api_version: str = api_version or settings.PINECONE_API_VERSION
        self._timeout: float | None = timeout if timeout is not None else settings.SEARCH_TIMEOUT_SEC

    @property
    def endpoint(self) -> IndexEndpoint:
        return self._endpoint


    async def warm_up(self) -> None:
        """Resolve the index host ahead of the first request; failures are only logged."""
        try:
            await self._endpoint.resolve()
        except EndpointResolutionError:
            logger.warning("[ENDPOINT] Host unresolved at startup; will retry on first request.")


    async def retrieve(self, query: str, partition: str | None = None, top_k: int | None = None) -> list[ContextFragment]:
        """
        Search *partition* for the *top_k* records closest to *query*.

        Returns
        -------
        list[ContextFragment]
            Hits in the order the index returned them (most relevant
            first).  An empty list means nothing matched.

        Raises
        ------
        EndpointResolutionError
            If the index host is unknown and cannot be looked up.
        RetrievalError
            If the search call fails or answers with a non-success status.
        """
        namespace = partition or self._namespace
        limit = top_k or self._top_k
        host = await self._endpoint.resolve()

        url = self._search_url(host, namespace)
        payload = {"query": {"inputs": {"text": query}, "top_k": limit}, "fields": self._fields()}
        logger.info("[RETRIEVE] namespace=%s top_k=%d query='%s'", namespace, limit, preview(query))

        try:
            response = await asyncio.to_thread(self._session.post, url, json=payload, headers=self._headers(), timeout=self._timeout)
        except requests.RequestException as exc:
            logger.error("[RETRIEVE] Search request to %s failed: %s", host, exc)
            raise RetrievalError(f"Pinecone Search Error: {exc}") from exc

        if not response.ok:
            reason = response.reason or f"HTTP {response.status_code}"
            logger.error("[RETRIEVE] Search returned %s %s", response.status_code, reason)
            raise RetrievalError(f"Pinecone Search Error: {reason}", status_code=response.status_code)

        try:
            body = response.json()
        except ValueError as exc:
            raise RetrievalError(f"Pinecone Search Error: invalid JSON response ({exc})", status_code=response.status_code) from exc

        fragments = self._parse_hits(body, self._text_field)
        logger.info("[RETRIEVE] Search returned %d fragment(s).", len(fragments))
        return fragments


    def _headers(self) -> dict[str, str]:
        return {"Api-Key": self._api_key, "Content-Type": "application/json", "X-Pinecone-API-Version": self._api_version}


    def _fields(self) -> list[str]:
        return list(dict.fromkeys(["id", self._text_field]))


    @staticmethod
    def _search_url(host: str, namespace: str) -> str:
        base = host if host.startswith(("http://", "https://")) else f"https://{host}"
        return f"{base.rstrip('/')}/records/namespaces/{namespace}/search"


    @staticmethod
    def _parse_hits(body: object, text_field: str) -> list[ContextFragment]:
        """Turn a records-search response body into ranked fragments."""
        if not isinstance(body, dict):
            return []
        result = body.get("result")
        if not isinstance(result, dict):
            return []
        hits: list[SearchHit] = [hit for hit in result.get("hits") or [] if isinstance(hit, dict)]

        fragments: list[ContextFragment] = []
        for rank, hit in enumerate(hits, 1):
            fields = hit.get("fields") or {}
            if not isinstance(fields, dict):
                fields = {"value": fields}
            text = fields.get(text_field)
            score = hit.get("_score")
            fragments.append(ContextFragment(id=str(hit.get("_id", "")), text=text if isinstance(text, str) and text else None, relevance_rank=rank, fields=dict(fields), score=float(score) if isinstance(score, (int, float)) else None))
        return fragments


    def __repr__(self) -> str:
        return f"PineconeRetriever(index='{self._endpoint.index_name}', namespace='{self._namespace}', top_k={self._top_k})"
