"""Whole-document analysis over overlapping word windows."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterator

from torahcite.config import Settings
from torahcite.constants import Confidence, MAX_WINDOW_WORDS
from torahcite.suggestions.cancellation import CancellationToken
from torahcite.suggestions.resolver import SuggestionResolver
from torahcite.value_objects import SourceSuggestion, Span, TextAnalysis

logger = logging.getLogger(__name__)


def iter_windows(
    text: str, max_words: int = MAX_WINDOW_WORDS
) -> Iterator[str]:
    """Every run of 1..max_words consecutive words, by start then width."""
    words = text.split()
    for i in range(len(words)):
        for width in range(1, min(max_words, len(words) - i) + 1):
            yield " ".join(words[i : i + width])


def build_analysis(
    text: str,
    window: str,
    suggestions: list[SourceSuggestion],
) -> TextAnalysis | None:
    """A TextAnalysis for ``window`` if it is confident and locatable.

    Sources are ordered highest confidence first (stable). The window is
    anchored at its first literal occurrence in ``text``; windows that
    only exist after whitespace collapsing are dropped.
    """
    if not suggestions:
        return None
    ranked = sorted(suggestions, key=lambda s: -s.confidence)
    top = ranked[0].confidence
    if top <= Confidence.ANALYSIS_THRESHOLD:
        return None
    start = text.find(window)
    if start == -1:
        return None
    return TextAnalysis(
        original_text=window,
        detected_sources=tuple(ranked),
        confidence=top,
        position=Span(start, start + len(window)),
    )


def deduplicate_analyses(
    analyses: list[TextAnalysis],
) -> list[TextAnalysis]:
    """Greedy highest-confidence-first selection of disjoint spans.

    Ties keep the earlier-produced record (sorted() is stable). The
    survivors come back ordered by start position.
    """
    by_confidence = sorted(analyses, key=lambda a: -a.confidence)
    kept: list[TextAnalysis] = []
    for analysis in by_confidence:
        if not any(
            analysis.position.overlaps(existing.position)
            for existing in kept
        ):
            kept.append(analysis)
    return sorted(kept, key=lambda a: a.position.start)


class SlidingWindowAnalyzer:
    """Runs the suggestion pipeline over every 1–5 word window.

    Exhaustive by intent (about 5 pipeline runs per word), so it is meant
    for editor-sized buffers. Window runs share a bounded worker pool;
    results are slotted by production order so dedup ties stay stable
    regardless of completion order.
    """

    def __init__(
        self,
        resolver: SuggestionResolver,
        settings: Settings | None = None,
        *,
        max_concurrency: int | None = None,
    ) -> None:
        cfg = settings or Settings()
        self._resolver = resolver
        self._max_concurrency = (
            max_concurrency or cfg.analysis_max_concurrency
        )

    async def analyze(
        self,
        text: str,
        token: CancellationToken | None = None,
    ) -> list[TextAnalysis]:
        """Non-overlapping analyses in document order.

        A pass cancelled through ``token`` returns [].
        """
        windows = list(iter_windows(text))
        if not windows:
            return []

        results: list[TextAnalysis | None] = [None] * len(windows)
        semaphore = asyncio.Semaphore(self._max_concurrency)

        async def _run_window(idx: int, window: str) -> None:
            async with semaphore:
                if token is not None and token.cancelled:
                    return
                suggestions = await self._resolver.get_source_suggestions(
                    window
                )
            results[idx] = build_analysis(text, window, suggestions)

        await asyncio.gather(
            *(_run_window(i, w) for i, w in enumerate(windows))
        )

        if token is not None and token.cancelled:
            logger.info(
                "event=analysis_cancelled windows=%d", len(windows)
            )
            return []

        produced = [r for r in results if r is not None]
        kept = deduplicate_analyses(produced)
        logger.info(
            "event=analysis_complete windows=%d confident=%d kept=%d",
            len(windows),
            len(produced),
            len(kept),
        )
        return kept
