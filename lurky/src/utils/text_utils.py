"""
Lurky - Text Utilities
=======================
Small stateless helpers for shaping model output and index records
into plain text.
"""

from __future__ import annotations

import json
from collections.abc import Mapping


def clean_generation_output(text: str | None) -> str:
    """
    Trim a model completion.

    Only leading / trailing whitespace is removed; the body is returned
    untouched so an already-canonical query survives verbatim.
    """
    if text is None:
        return ""
    return text.strip()


def dump_fields(fields: Mapping[str, object] | None) -> str:
    """
    Render raw record fields as JSON.

    Used when a fragment carries no text so it still takes up a slot in
    the assembled context.  Non-ASCII characters are kept as-is and the
    field order of the index response is preserved.
    """
    return json.dumps(dict(fields or {}), ensure_ascii=False, default=str)


def preview(text: str, limit: int = 80) -> str:
    """Single-line, length-capped rendering of *text* for log messages."""
    flat = " ".join(text.split())
    if len(flat) <= limit:
        return flat
    return flat[: limit - 1] + "…"
