"""Request/response schemas for the HTTP API."""

from typing import Any

from pydantic import BaseModel, Field

from torahcite.value_objects import SourceSuggestion, TextAnalysis


class APIResponse(BaseModel):
    """Standard response envelope for all API endpoints."""

    success: bool
    data: Any | None = None
    error: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class TextRequest(BaseModel):
    """Request body for POST /api/suggestions and /api/analyze."""

    text: str = Field(max_length=50_000)


class SuggestionResponse(BaseModel):
    """SourceSuggestion in API response format."""

    id: str
    ref: str
    localized_ref: str
    body_text: str
    localized_body_text: str
    category: str
    confidence: float
    matched_text: str
    book: str

    @classmethod
    def from_domain(cls, s: SourceSuggestion) -> "SuggestionResponse":
        return cls(
            id=s.id,
            ref=s.ref,
            localized_ref=s.localized_ref,
            body_text=s.body_text,
            localized_body_text=s.localized_body_text,
            category=s.category,
            confidence=s.confidence,
            matched_text=s.matched_text,
            book=s.book,
        )


class SpanResponse(BaseModel):
    start: int
    end: int


class AnalysisResponse(BaseModel):
    """TextAnalysis in API response format."""

    original_text: str
    detected_sources: list[SuggestionResponse]
    confidence: float
    position: SpanResponse

    @classmethod
    def from_domain(cls, a: TextAnalysis) -> "AnalysisResponse":
        return cls(
            original_text=a.original_text,
            detected_sources=[
                SuggestionResponse.from_domain(s)
                for s in a.detected_sources
            ],
            confidence=a.confidence,
            position=SpanResponse(
                start=a.position.start, end=a.position.end
            ),
        )
