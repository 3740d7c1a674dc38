"""FastAPI dependency injection for the shared pipeline."""

from __future__ import annotations

from fastapi import Request

from torahcite.services.pipeline import SuggestionPipeline


def get_pipeline(request: Request) -> SuggestionPipeline:
    """The process-wide pipeline built during app startup."""
    pipeline: SuggestionPipeline = request.app.state.pipeline
    return pipeline
