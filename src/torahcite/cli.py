"""CLI entry point: ``torahcite suggest`` and ``torahcite analyze``."""

from __future__ import annotations

# Phase 1: Singleton logging: before any transitive litellm imports
from torahcite.logging_config import setup_logging

setup_logging()

import argparse  # noqa: E402
import asyncio  # noqa: E402
import json  # noqa: E402
import sys  # noqa: E402
from dataclasses import asdict  # noqa: E402
from pathlib import Path  # noqa: E402

from torahcite import __version__  # noqa: E402
from torahcite.config import Settings  # noqa: E402
from torahcite.logging_config import (  # noqa: E402
    cleanup_third_party_handlers,
)
from torahcite.services.pipeline import create_pipeline  # noqa: E402
from torahcite.value_objects import (  # noqa: E402
    SourceSuggestion,
    TextAnalysis,
)

# Phase 2: Clear litellm's duplicate handlers after all imports
cleanup_third_party_handlers()

_SNIPPET_CHARS = 80


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(f"torahcite {__version__}")
        return

    if args.command == "suggest":
        _run_suggest(args)
    elif args.command == "analyze":
        _run_analyze(args)
    else:
        parser.print_help()


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="torahcite",
        description=(
            "Detect Torah and Talmud citations in prose "
            "and suggest matching source texts."
        ),
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print version and exit",
    )

    sub = parser.add_subparsers(dest="command")

    suggest = sub.add_parser(
        "suggest",
        help="Suggest sources for a piece of text",
    )
    suggest.add_argument(
        "text",
        type=str,
        help="Text to scan (use '-' to read stdin)",
    )
    _add_common_flags(suggest)

    analyze = sub.add_parser(
        "analyze",
        help="Find every cited span in a document",
    )
    analyze.add_argument(
        "path",
        type=str,
        help="Path to a UTF-8 text file (use '-' to read stdin)",
    )
    _add_common_flags(analyze)

    return parser


def _add_common_flags(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--json",
        action="store_true",
        help="Print results as JSON",
    )
    p.add_argument(
        "--no-ai",
        action="store_true",
        help="Skip the LLM candidate generator",
    )


def _settings_for(args: argparse.Namespace) -> Settings:
    settings = Settings()
    if args.no_ai:
        settings = settings.model_copy(
            update={"candidate_generator_enabled": False}
        )
    return settings


def _run_suggest(args: argparse.Namespace) -> None:
    """Execute the suggest command."""
    text = sys.stdin.read() if args.text == "-" else args.text
    suggestions = asyncio.run(_suggest(text, _settings_for(args)))

    if args.json:
        print(
            json.dumps(
                [asdict(s) for s in suggestions],
                ensure_ascii=False,
                indent=2,
            )
        )
        return

    if not suggestions:
        print("No sources found.")
        return
    for s in suggestions:
        print(_format_suggestion(s))


def _run_analyze(args: argparse.Namespace) -> None:
    """Execute the analyze command."""
    if args.path == "-":
        text = sys.stdin.read()
    else:
        path = Path(args.path)
        if not path.exists():
            print(f"Error: {path} does not exist", file=sys.stderr)
            sys.exit(1)
        text = path.read_text(encoding="utf-8")

    analyses = asyncio.run(_analyze(text, _settings_for(args)))

    if args.json:
        print(
            json.dumps(
                [asdict(a) for a in analyses],
                ensure_ascii=False,
                indent=2,
            )
        )
        return

    if not analyses:
        print("No citations found.")
        return
    for a in analyses:
        print(_format_analysis(a))


async def _suggest(
    text: str, settings: Settings
) -> list[SourceSuggestion]:
    pipeline = create_pipeline(settings)
    try:
        return await pipeline.resolver.get_source_suggestions(text)
    finally:
        await pipeline.aclose()


async def _analyze(text: str, settings: Settings) -> list[TextAnalysis]:
    pipeline = create_pipeline(settings)
    try:
        return await pipeline.analyzer.analyze(text)
    finally:
        await pipeline.aclose()


def _format_suggestion(s: SourceSuggestion) -> str:
    body = s.body_text.replace("\n", " ")
    if len(body) > _SNIPPET_CHARS:
        body = body[:_SNIPPET_CHARS] + "..."
    return f"{s.confidence:.2f}  {s.ref}  ({s.id})\n      {body}"


def _format_analysis(a: TextAnalysis) -> str:
    refs = ", ".join(s.ref for s in a.detected_sources[:3])
    return (
        f"[{a.position.start}:{a.position.end}] "
        f"{a.original_text!r} -> {refs} ({a.confidence:.2f})"
    )


if __name__ == "__main__":
    main()
