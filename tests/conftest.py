from __future__ import annotations

import os

# Required settings must exist before lurky.config.settings is imported
os.environ.setdefault("GOOGLE_API_KEY", "test-google-key")
os.environ.setdefault("PINECONE_API_KEY", "test-pinecone-key")
os.environ.setdefault("PINECONE_INDEX", "lurky-test")

from types import SimpleNamespace  # noqa: E402

import pytest  # noqa: E402

from lurky.src.core.models import ContextFragment  # noqa: E402

HOODIE_QUESTION_EN = "What colors does the Lurky hoodie come in?"
HOODIE_QUESTION_ZH = "Lurky连帽衫有什么颜色？"

HOODIE_TEXTS = [
    "Lurky Classic Hoodie — available in Black, Heather Grey and Forest Green.",
    "Lurky Classic Hoodie sizing runs from XS to XXL.",
    "Lurky Zip Hoodie — limited edition Sand colorway.",
    "Care: machine wash cold, tumble dry low.",
]


# --- Fakes -------------------------------------------------------------------


class FakeDescriber:
    """Stand-in for the Pinecone SDK client."""

    def __init__(self, hosts: list[object]) -> None:
        # Each entry is either a host string or an exception to raise
        self._hosts = list(hosts)
        self.calls: list[str] = []

    def describe_index(self, name: str) -> object:
        self.calls.append(name)
        item = self._hosts.pop(0) if len(self._hosts) > 1 else self._hosts[0]
        if isinstance(item, Exception):
            raise item
        return SimpleNamespace(name=name, host=item)


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: object = None, reason: str = "OK") -> None:
        self.status_code = status_code
        self.reason = reason
        self._payload = payload

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def json(self) -> object:
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class FakeRetriever:
    def __init__(self, fragments: list[ContextFragment] | None = None, error: Exception | None = None) -> None:
        self._fragments = fragments or []
        self._error = error
        self.queries: list[str] = []
        self.warmed = 0

    async def warm_up(self) -> None:
        self.warmed += 1

    async def retrieve(self, query: str, partition: str | None = None, top_k: int | None = None) -> list[ContextFragment]:
        self.queries.append(query)
        if self._error is not None:
            raise self._error
        return list(self._fragments)


def make_fragments(texts: list[str | None]) -> list[ContextFragment]:
    return [ContextFragment(id=f"prod-{i}", text=text, relevance_rank=i, fields={"id": f"prod-{i}"} if text is None else {"id": f"prod-{i}", "text": text}) for i, text in enumerate(texts, 1)]


def search_payload(texts: list[str]) -> dict:
    return {"result": {"hits": [{"_id": f"prod-{i}", "_score": 1.0 - i * 0.1, "fields": {"id": f"prod-{i}", "text": text}} for i, text in enumerate(texts, 1)]}, "usage": {"read_units": 1}}


# --- Fixtures ----------------------------------------------------------------


@pytest.fixture
def hoodie_fragments() -> list[ContextFragment]:
    return make_fragments(list(HOODIE_TEXTS))
