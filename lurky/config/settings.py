"""
Lurky - Centralized Configuration
==================================
Uses ``pydantic-settings`` (``BaseSettings``) to load *all* configuration
from environment variables and the project-level ``.env`` file.

Security
--------
- ``GOOGLE_API_KEY`` and ``PINECONE_API_KEY`` are typed as ``SecretStr``
  and have **no default value**.  The raw values are never exposed in
  repr, logs, or tracebacks.
- A missing credential is reported as ``ConfigurationError`` the moment
  this module is imported, so the service refuses to start instead of
  failing on the first request.

Retrieval policy
----------------
``SEARCH_TOP_K`` and ``PINECONE_NAMESPACE`` are settings rather than
literals in the search call, so they can be tuned per deployment.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import SecretStr, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from lurky.src.core.exceptions import ConfigurationError


class Settings(BaseSettings):
    """
    Application-wide settings.

    Fields *without* a default are **required**.

    Attributes
    ----------
    GOOGLE_API_KEY : SecretStr
        API key for Google AI Studio (Gemini).  **Required.**
    PINECONE_API_KEY : SecretStr
        API key for the Pinecone project hosting the product index.
        **Required.**
    PINECONE_INDEX : str
        Name of the Pinecone index.  Resolved to a host at startup.
    PINECONE_NAMESPACE : str
        Partition searched inside the index.
    PINECONE_TEXT_FIELD : str
        Record field holding the fragment text.
    SEARCH_TOP_K : int
        Number of fragments requested per search.
    SEARCH_TIMEOUT_SEC : float | None
        Optional HTTP timeout for the search call.  Unset means the
        ``requests`` default (no timeout).
    LLM_MODEL : str
        Gemini model used for both translation and answering.
    CANONICAL_LANGUAGE : str
        Language every retrieval query is translated into.
    STRICT_TRANSLATION : bool
        Raise on translation failure instead of searching with the
        untranslated question.
    """

    # ── Environment Mode ───────────────────────────────────────────────
    ENV: Literal["dev", "prod"] = "dev"
    LOG_LEVEL: str | None = None

    # ── API Keys (REQUIRED, no default) ────────────────────────────────
    GOOGLE_API_KEY: SecretStr
    PINECONE_API_KEY: SecretStr

    # ── Pinecone ───────────────────────────────────────────────────────
    PINECONE_INDEX: str
    PINECONE_NAMESPACE: str = "lurky-products"
    PINECONE_API_VERSION: str = "2024-10"
    PINECONE_TEXT_FIELD: str = "text"

    # ── Retrieval Parameters ───────────────────────────────────────────
    SEARCH_TOP_K: int = 4
    SEARCH_TIMEOUT_SEC: float | None = None

    # ── Model Configuration ────────────────────────────────────────────
    LLM_MODEL: str = "gemini-2.5-flash"
    TRANSLATION_TEMPERATURE: float = 0.0
    ANSWER_TEMPERATURE: float = 0.3

    # ── Localisation ───────────────────────────────────────────────────
    CANONICAL_LANGUAGE: str = "English"
    BOT_NAME: str = "Lurky Bot"
    BRAND_NAME: str = "Lurky"
    STRICT_TRANSLATION: bool = False

    # ── Validators ─────────────────────────────────────────────────────

    @field_validator("SEARCH_TOP_K")
    @classmethod
    def _top_k_range(cls, v: int) -> int:
        if not 1 <= v <= 100:
            raise ValueError(f"SEARCH_TOP_K must be 1–100, got {v}")
        return v


    @field_validator("TRANSLATION_TEMPERATURE", "ANSWER_TEMPERATURE")
    @classmethod
    def _temperature_range(cls, v: float) -> float:
        if not 0.0 <= v <= 2.0:
            raise ValueError(f"temperature must be 0.0–2.0, got {v}")
        return v


    @field_validator("PINECONE_INDEX", "PINECONE_NAMESPACE", "PINECONE_TEXT_FIELD")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("value must not be blank")
        return v.strip()

    # ── Pydantic Settings Configuration ────────────────────────────────
    model_config = SettingsConfigDict(env_file=Path(__file__).resolve().parent.parent.parent / ".env", env_file_encoding="utf-8", extra="ignore")


def load_settings() -> Settings:
    """Build ``Settings``, reporting validation problems as ``ConfigurationError``."""
    try:
        return Settings()
    except ValidationError as exc:
        missing = ", ".join(".".join(str(p) for p in err["loc"]) for err in exc.errors())
        raise ConfigurationError(f"Invalid or missing configuration: {missing}") from exc


# ── Singleton Instance ─────────────────────────────────────────────────
# Import this throughout the project:
#     from lurky.config.settings import settings
settings = load_settings()
