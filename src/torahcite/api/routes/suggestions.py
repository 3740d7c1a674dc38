"""Suggestion and document-analysis endpoints."""

from __future__ import annotations

import logging
import time

from fastapi import APIRouter, Depends

from torahcite.api.dependencies import get_pipeline
from torahcite.api.schemas import (
    AnalysisResponse,
    APIResponse,
    SuggestionResponse,
    TextRequest,
)
from torahcite.services.pipeline import SuggestionPipeline

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["suggestions"])


@router.post("/suggestions")
async def get_suggestions(
    body: TextRequest,
    pipeline: SuggestionPipeline = Depends(get_pipeline),
) -> APIResponse:
    """Ordered source suggestions for the posted text (at most 10)."""
    start = time.monotonic()
    suggestions = await pipeline.resolver.get_source_suggestions(body.text)
    elapsed_ms = (time.monotonic() - start) * 1000
    logger.info(
        "event=suggestions_served count=%d duration_ms=%.1f",
        len(suggestions),
        elapsed_ms,
    )
    return APIResponse(
        success=True,
        data=[SuggestionResponse.from_domain(s) for s in suggestions],
        metadata={"count": len(suggestions), "duration_ms": elapsed_ms},
    )


@router.post("/analyze")
async def analyze_text(
    body: TextRequest,
    pipeline: SuggestionPipeline = Depends(get_pipeline),
) -> APIResponse:
    """Non-overlapping cited spans in the posted document."""
    start = time.monotonic()
    analyses = await pipeline.analyzer.analyze(body.text)
    elapsed_ms = (time.monotonic() - start) * 1000
    logger.info(
        "event=analysis_served count=%d duration_ms=%.1f",
        len(analyses),
        elapsed_ms,
    )
    return APIResponse(
        success=True,
        data=[AnalysisResponse.from_domain(a) for a in analyses],
        metadata={"count": len(analyses), "duration_ms": elapsed_ms},
    )
