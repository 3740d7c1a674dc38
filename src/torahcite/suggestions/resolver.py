"""Candidate resolution: direct lookup → search fallback → generic search.

Confidence is fixed by how a candidate was found and which tier resolved
it; it is never rescaled across unrelated candidates.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Protocol

from torahcite.constants import (
    CANDIDATE_SEARCH_LIMIT,
    GENERIC_SEARCH_LIMIT,
    MAX_SUGGESTIONS,
    CandidateOrigin,
    Confidence,
    SuggestionOrigin,
)
from torahcite.detection.extractor import ReferenceExtractor
from torahcite.gateway.protocols import TextGateway
from torahcite.gateway.schemas import CanonicalText, SearchHit
from torahcite.value_objects import (
    Candidate,
    SourceSuggestion,
    suggestion_id,
)

logger = logging.getLogger(__name__)


class ReferenceGenerator(Protocol):
    async def suggest_references(self, text: str) -> list[str]: ...


def _book_from_ref(ref: str) -> str:
    return ref.split(" ")[0]


def _from_text(
    text: CanonicalText,
    candidate: Candidate,
    origin: SuggestionOrigin,
    confidence: float,
) -> SourceSuggestion:
    return SourceSuggestion(
        id=suggestion_id(origin, candidate.ref),
        ref=text.ref,
        localized_ref=text.localized_ref,
        body_text=text.body_text,
        localized_body_text=text.localized_body_text,
        category=text.category,
        confidence=confidence,
        matched_text=candidate.matched_text,
        book=text.book,
    )


def _from_hit(
    hit: SearchHit,
    matched_text: str,
    origin: SuggestionOrigin,
    confidence: float,
) -> SourceSuggestion:
    # Search carries no separate localized body; reuse the snippet
    return SourceSuggestion(
        id=suggestion_id(origin, hit.ref),
        ref=hit.ref,
        localized_ref=hit.localized_ref,
        body_text=hit.snippet_text,
        localized_body_text=hit.snippet_text,
        category=hit.category,
        confidence=confidence,
        matched_text=matched_text,
        book=_book_from_ref(hit.ref),
    )


class SuggestionResolver:
    """Turns raw text into an ordered list of source suggestions."""

    def __init__(
        self,
        gateway: TextGateway,
        extractor: ReferenceExtractor | None = None,
        generator: ReferenceGenerator | None = None,
    ) -> None:
        self._gateway = gateway
        self._extractor = extractor or ReferenceExtractor()
        self._generator = generator

    async def get_source_suggestions(
        self, text: str
    ) -> list[SourceSuggestion]:
        """Suggestions for ``text``, at most 10, in generation order.

        1. Generator references, direct lookup only.
        2. Otherwise pattern candidates, direct then search fallback.
        3. If still nothing, one generic search over the whole text.
        """
        if not text.strip():
            return []

        generated = await self._resolve_generated(text)
        if generated is not None:
            return generated[:MAX_SUGGESTIONS]

        candidates = self._extractor.detect(text)
        suggestions: list[SourceSuggestion] = []
        if candidates:
            resolved = await asyncio.gather(
                *(self.resolve(c) for c in candidates)
            )
            for batch in resolved:
                suggestions.extend(batch)

        if not suggestions:
            suggestions = await self.resolve_generic(text)

        return suggestions[:MAX_SUGGESTIONS]

    async def resolve(self, candidate: Candidate) -> list[SourceSuggestion]:
        """Resolve one candidate.

        AI-assisted candidates use the direct path only; pattern
        candidates fall back to search when the lookup misses.
        """
        direct = await self.resolve_direct(candidate)
        if direct is not None:
            return [direct]
        if candidate.origin == CandidateOrigin.AI:
            return []
        return await self.resolve_search(candidate)

    async def resolve_direct(
        self, candidate: Candidate
    ) -> SourceSuggestion | None:
        outcome = await self._gateway.fetch_by_reference(candidate.ref)
        if not outcome.found or outcome.value is None:
            logger.debug(
                "event=direct_miss ref=%s status=%s",
                candidate.ref,
                outcome.status,
            )
            return None
        if candidate.origin == CandidateOrigin.AI:
            return _from_text(
                outcome.value,
                candidate,
                SuggestionOrigin.AI,
                Confidence.AI_ASSISTED,
            )
        return _from_text(
            outcome.value,
            candidate,
            SuggestionOrigin.DIRECT,
            candidate.confidence,
        )

    async def resolve_search(
        self, candidate: Candidate
    ) -> list[SourceSuggestion]:
        outcome = await self._gateway.search(
            candidate.matched_text, CANDIDATE_SEARCH_LIMIT
        )
        confidence = candidate.confidence * Confidence.SEARCH_PENALTY
        return [
            _from_hit(
                hit,
                candidate.matched_text,
                SuggestionOrigin.SEARCH,
                confidence,
            )
            for hit in outcome.unwrap_or([])
        ]

    async def resolve_generic(self, text: str) -> list[SourceSuggestion]:
        outcome = await self._gateway.search(text, GENERIC_SEARCH_LIMIT)
        if outcome.failed_upstream:
            logger.debug(
                "event=generic_search_unavailable class=%s",
                outcome.error_class.value if outcome.error_class else "",
            )
        return [
            _from_hit(
                hit,
                text,
                SuggestionOrigin.GENERAL,
                Confidence.GENERIC_SEARCH,
            )
            for hit in outcome.unwrap_or([])
        ]

    async def _resolve_generated(
        self, text: str
    ) -> list[SourceSuggestion] | None:
        """AI-path suggestions, or None when the generator had nothing."""
        if self._generator is None:
            return None
        refs = await self._generator.suggest_references(text)
        if not refs:
            return None

        candidates = [
            Candidate(
                ref=ref,
                confidence=Confidence.AI_ASSISTED,
                matched_text=text,
                origin=CandidateOrigin.AI,
            )
            for ref in refs
        ]
        resolved = await asyncio.gather(
            *(self.resolve_direct(c) for c in candidates)
        )
        return [s for s in resolved if s is not None]
