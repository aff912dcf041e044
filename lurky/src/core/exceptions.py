"""
Lurky - Error Kinds
====================
Every failure raised below the ``RAGManager`` derives from
``LurkyError``.  The orchestrator is the only place that catches them;
``ConfigurationError`` is the exception and fires at startup.
"""

from __future__ import annotations


class LurkyError(Exception):
    """Base class for all pipeline errors."""


class ConfigurationError(LurkyError):
    """Raised for invalid or missing configuration."""


class EndpointResolutionError(LurkyError):
    """Raised when the similarity index host cannot be looked up."""


class RetrievalError(LurkyError):
    """Raised when a similarity search call fails."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class GenerationError(LurkyError):
    """Raised when a translation or answer generation call fails."""
