from __future__ import annotations

import pytest
from pydantic import ValidationError

from lurky.config.settings import Settings, load_settings
from lurky.src.core.exceptions import ConfigurationError

REQUIRED = {"GOOGLE_API_KEY": "g-key-1234", "PINECONE_API_KEY": "p-key-5678", "PINECONE_INDEX": "lurky"}


def test_defaults_match_retrieval_policy() -> None:
    s = Settings(_env_file=None, **REQUIRED)
    assert s.SEARCH_TOP_K == 4
    assert s.PINECONE_NAMESPACE == "lurky-products"
    assert s.PINECONE_API_VERSION == "2024-10"
    assert s.TRANSLATION_TEMPERATURE == 0.0
    assert s.ANSWER_TEMPERATURE == 0.3
    assert s.CANONICAL_LANGUAGE == "English"
    assert s.STRICT_TRANSLATION is False
    assert s.SEARCH_TIMEOUT_SEC is None


def test_secrets_are_not_exposed_in_repr() -> None:
    s = Settings(_env_file=None, **REQUIRED)
    assert "g-key-1234" not in repr(s)
    assert "p-key-5678" not in repr(s)
    assert s.PINECONE_API_KEY.get_secret_value() == "p-key-5678"


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SEARCH_TOP_K", "8")
    monkeypatch.setenv("PINECONE_NAMESPACE", "lurky-archive")
    s = Settings(_env_file=None, **REQUIRED)
    assert s.SEARCH_TOP_K == 8
    assert s.PINECONE_NAMESPACE == "lurky-archive"


@pytest.mark.parametrize("field,value", [("SEARCH_TOP_K", 0), ("SEARCH_TOP_K", 101), ("ANSWER_TEMPERATURE", 2.5), ("PINECONE_NAMESPACE", "  ")])
def test_invalid_values_rejected(field: str, value: object) -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, **{**REQUIRED, field: value})


def test_missing_credential_is_configuration_error(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    monkeypatch.delenv("PINECONE_API_KEY", raising=False)
    monkeypatch.setitem(Settings.model_config, "env_file", tmp_path / "missing.env")
    with pytest.raises(ConfigurationError, match="PINECONE_API_KEY"):
        load_settings()
