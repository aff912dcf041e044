"""
Lurky - Ask From the Command Line
==================================
CLI entry point that:
    1. Loads settings (fail-fast on missing credentials).
    2. Builds the ``RAGManager`` and resolves the Pinecone index host.
    3. Asks one question and prints the ``AnswerResult``.

Flags:
    --json       Print the raw result as JSON instead of a summary.

Usage:
    python -m lurky.scripts.ask "What colors does the Lurky hoodie come in?"
    python -m lurky.scripts.ask --json "Lurky连帽衫有什么颜色？"
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
import time
from pathlib import Path

# ── Ensure project root is importable when run directly ────────────────
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))


# ── CLI Argument Parsing ───────────────────────────────────────────────

def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="ask", description="Lurky: ask the product assistant a question.")
    parser.add_argument("question", help="Question in any language.")
    parser.add_argument("--json", action="store_true", default=False, help="Print the result as JSON.")
    return parser.parse_args(argv)


# ── Main Orchestration ─────────────────────────────────────────────────

def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    t_start = time.perf_counter()

    try:
        from lurky.config.settings import settings
    except Exception as exc:
        print("\n[FATAL] Configuration error, check your .env file:\n")
        print(f"  {exc}")
        print()
        return 1

    from lurky.src.core.rag_engine import RAGManager

    rag = RAGManager()
    result = asyncio.run(_ask(rag, args.question))
    elapsed = time.perf_counter() - t_start

    if args.json:
        print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
    else:
        _print_result(result, settings, elapsed)
    return 2 if result.failed else 0


async def _ask(rag: object, question: str) -> object:
    await rag.warm_up()  # type: ignore[attr-defined]
    return await rag.ask(question)  # type: ignore[attr-defined]


# ── Pretty-print helpers ──────────────────────────────────────────────

def _print_result(result: object, settings: object, elapsed: float) -> None:
    print()
    print("=" * 60)
    print("  LURKY Product Assistant")
    print("=" * 60)
    print(f"  Model      : {settings.LLM_MODEL}")            # type: ignore[attr-defined]
    print(f"  Index      : {settings.PINECONE_INDEX}")       # type: ignore[attr-defined]
    print(f"  Namespace  : {settings.PINECONE_NAMESPACE}")   # type: ignore[attr-defined]
    print("-" * 60)
    print(f"  Question   : {result.original_question}")     # type: ignore[attr-defined]
    print(f"  Retrieval  : {result.canonical_query}")        # type: ignore[attr-defined]
    if result.error:                                         # type: ignore[attr-defined]
        print(f"  Error      : {result.error}")              # type: ignore[attr-defined]
    print("-" * 60)
    print(result.answer)                                     # type: ignore[attr-defined]
    print("-" * 60)
    print(f"  Elapsed    : {elapsed:>8.2f}s")
    print("=" * 60)
    print()


# ── Entry point ────────────────────────────────────────────────────────

if __name__ == "__main__":
    sys.exit(main())
