"""Suggestion pipeline: resolution, sliding-window analysis, dedup."""

from torahcite.suggestions.analyzer import (
    SlidingWindowAnalyzer,
    deduplicate_analyses,
    iter_windows,
)
from torahcite.suggestions.cancellation import CancellationToken
from torahcite.suggestions.resolver import SuggestionResolver

__all__ = [
    "CancellationToken",
    "SlidingWindowAnalyzer",
    "SuggestionResolver",
    "deduplicate_analyses",
    "iter_windows",
]
