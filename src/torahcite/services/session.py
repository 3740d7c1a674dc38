"""Caller-facing event surface for an editing session.

The editor decides *when* to ask (debouncing is its job); the session
makes sure answers to superseded requests are never emitted. Every
request takes a new generation number, and a result is delivered only
if its generation is still current when it arrives.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeAlias, TypeVar

from torahcite.suggestions.analyzer import SlidingWindowAnalyzer
from torahcite.suggestions.cancellation import CancellationToken
from torahcite.suggestions.resolver import SuggestionResolver
from torahcite.value_objects import SourceSuggestion, TextAnalysis

logger = logging.getLogger(__name__)

T = TypeVar("T")

Listener: TypeAlias = Callable[[T], Awaitable[None] | None]


async def _emit(listener: Listener[T] | None, payload: T) -> None:
    if listener is None:
        return
    result: Any = listener(payload)
    if inspect.isawaitable(result):
        await result


def format_insertion(suggestion: SourceSuggestion) -> str:
    """Inline citation text, e.g. ``[Genesis 1:1 / בראשית א׳:א׳]``."""
    if suggestion.localized_ref:
        return f"[{suggestion.ref} / {suggestion.localized_ref}]"
    return f"[{suggestion.ref}]"


class SuggestionSession:
    """Delivers suggestions and analyses for one document to listeners."""

    def __init__(
        self,
        resolver: SuggestionResolver,
        analyzer: SlidingWindowAnalyzer,
        *,
        on_suggestions: Listener[list[SourceSuggestion]] | None = None,
        on_analysis: Listener[list[TextAnalysis]] | None = None,
        on_insert: Listener[SourceSuggestion] | None = None,
        min_text_length: int = 10,
    ) -> None:
        self._resolver = resolver
        self._analyzer = analyzer
        self._on_suggestions = on_suggestions
        self._on_analysis = on_analysis
        self._on_insert = on_insert
        self._min_text_length = min_text_length
        self._suggestion_generation = 0
        self._analysis_generation = 0
        self._analysis_token: CancellationToken | None = None

    @property
    def suggestion_generation(self) -> int:
        return self._suggestion_generation

    @property
    def analysis_generation(self) -> int:
        return self._analysis_generation

    async def request_suggestions(
        self, text: str
    ) -> list[SourceSuggestion] | None:
        """Run a detection pass and emit its result if still current.

        Returns None when the text is too short to bother with or the
        result was superseded by a newer request.
        """
        if len(text.strip()) <= self._min_text_length:
            return None

        self._suggestion_generation += 1
        generation = self._suggestion_generation
        suggestions = await self._resolver.get_source_suggestions(text)

        if generation != self._suggestion_generation:
            logger.debug(
                "event=stale_suggestions_dropped generation=%d current=%d",
                generation,
                self._suggestion_generation,
            )
            return None
        await _emit(self._on_suggestions, suggestions)
        return suggestions

    async def request_analysis(
        self, text: str
    ) -> list[TextAnalysis] | None:
        """Analyze the whole buffer, cancelling any pass still running."""
        if self._analysis_token is not None:
            self._analysis_token.cancel()
        token = CancellationToken()
        self._analysis_token = token
        self._analysis_generation += 1
        generation = self._analysis_generation

        analyses = await self._analyzer.analyze(text, token)

        if token.cancelled or generation != self._analysis_generation:
            logger.debug(
                "event=stale_analysis_dropped generation=%d current=%d",
                generation,
                self._analysis_generation,
            )
            return None
        self._analysis_token = None
        await _emit(self._on_analysis, analyses)
        return analyses

    async def insert(self, suggestion: SourceSuggestion) -> str:
        """Notify the insert listener; returns the text to insert."""
        await _emit(self._on_insert, suggestion)
        return format_insertion(suggestion)

    def cancel(self) -> None:
        """Drop whatever is in flight; nothing pending will be emitted."""
        if self._analysis_token is not None:
            self._analysis_token.cancel()
            self._analysis_token = None
        self._suggestion_generation += 1
        self._analysis_generation += 1
