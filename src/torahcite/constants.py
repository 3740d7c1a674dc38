"""Shared constants: single source of truth for cross-module values.

All magic strings and numbers that appear in 2+ files belong here.
StrEnum members are str-compatible, so id prefixes and JSON payloads
work unchanged.
"""

from __future__ import annotations

from enum import StrEnum

# ── String Enums ─────────────────────────────────────────


class SuggestionOrigin(StrEnum):
    """How a suggestion was produced. Doubles as its id prefix."""

    DIRECT = "direct"
    SEARCH = "search"
    AI = "ai"
    GENERAL = "general"


class CandidateOrigin(StrEnum):
    """Where a candidate reference came from."""

    PATTERN = "pattern"
    AI = "ai"


class OutcomeStatus(StrEnum):
    """Result of one call across the gateway boundary."""

    OK = "ok"
    EMPTY = "empty"
    FAILED = "failed"


# ── Confidence ───────────────────────────────────────────


class Confidence:
    """Named confidence weights: single source of truth."""

    TORAH_VERSE = 0.90  # Pentateuch book + chapter:verse
    TALMUD_FOLIO = 0.80  # Word + folio (2a, 31b)
    MISHNAH = 0.85  # Mishnah + tractate + chapter:mishnah
    COMMENTARY = 0.70  # Rashi/Tosafot/... on Book c:v
    HEBREW_TRACTATE = 0.90  # Hebrew tractate + folio
    AI_ASSISTED = 0.95  # Candidate generator references
    GENERIC_SEARCH = 0.50  # Whole-text search fallback
    SEARCH_PENALTY = 0.8  # Multiplier when direct lookup misses
    ANALYSIS_THRESHOLD = 0.6  # Windows must score strictly above this


# ── Resolver Limits ──────────────────────────────────────

MAX_SUGGESTIONS = 10
CANDIDATE_SEARCH_LIMIT = 3
GENERIC_SEARCH_LIMIT = 5
MAX_GENERATED_REFERENCES = 5

# ── Sliding Window ───────────────────────────────────────

MAX_WINDOW_WORDS = 5

# ── Cache Keys ───────────────────────────────────────────

TEXT_CACHE_PREFIX = "text"
SEARCH_CACHE_PREFIX = "search"


def text_cache_key(ref: str) -> str:
    return f"{TEXT_CACHE_PREFIX}:{ref}"


def search_cache_key(query: str, limit: int) -> str:
    return f"{SEARCH_CACHE_PREFIX}:{query}:{limit}"


# ── Circuit Breaker Configuration ────────────────────────

CB_LLM_FAILURE_THRESHOLD = 5
CB_LLM_RECOVERY_TIMEOUT = 30
CB_GATEWAY_FAILURE_THRESHOLD = 5
CB_GATEWAY_RECOVERY_TIMEOUT = 30

# ── Retry Strategy ───────────────────────────────────────

RETRY_MAX_ATTEMPTS = 3
RETRY_INITIAL_WAIT = 2
RETRY_MAX_WAIT = 30
GATEWAY_RETRY_INITIAL_WAIT = 0.5
GATEWAY_RETRY_MAX_WAIT = 4

# ── LLM Output ───────────────────────────────────────────

LLM_MAX_OUTPUT_TOKENS = 512

# ── Misc ─────────────────────────────────────────────────

ERROR_TRUNCATION_CHARS = 200

# ── Auth Exempt Paths ────────────────────────────────────

# Each entry also covers the paths nested below it.
DEFAULT_AUTH_EXEMPT_PATHS = (
    "/api/health",
    "/api/docs",
    "/api/redoc",
    "/api/openapi.json",
)

API_KEY_HEADER = "X-API-Key"
