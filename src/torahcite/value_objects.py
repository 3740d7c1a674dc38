"""Frozen, identity-less domain types shared across all layers.

These are the vocabulary of the system. Confidence is always a float in
[0, 1]; positions are half-open character spans into the analyzed text.
"""

from __future__ import annotations

from dataclasses import dataclass

from torahcite.constants import CandidateOrigin, SuggestionOrigin


@dataclass(frozen=True)
class Candidate:
    """A reference the detectors believe the author cited or is typing."""

    ref: str
    confidence: float
    matched_text: str
    origin: CandidateOrigin = CandidateOrigin.PATTERN


@dataclass(frozen=True)
class SourceSuggestion:
    """One source the caller may show or insert."""

    id: str
    ref: str
    localized_ref: str
    body_text: str
    localized_body_text: str
    category: str
    confidence: float  # 0.0 to 1.0
    matched_text: str
    book: str

    def __post_init__(self) -> None:
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(
                f"confidence out of range: {self.confidence}"
            )


def suggestion_id(origin: SuggestionOrigin, ref: str) -> str:
    """Deterministic id: same origin and ref always give the same id."""
    return f"{origin}-{ref}"


@dataclass(frozen=True)
class Span:
    """Half-open character range ``[start, end)``."""

    start: int
    end: int

    def overlaps(self, other: Span) -> bool:
        return self.start < other.end and self.end > other.start


@dataclass(frozen=True)
class TextAnalysis:
    """A stretch of the document that resolved to confident sources."""

    original_text: str
    detected_sources: tuple[SourceSuggestion, ...]
    confidence: float
    position: Span
