"""Reference detection: pattern rules and LLM-assisted candidates."""

from torahcite.detection.extractor import ReferenceExtractor
from torahcite.detection.generator import (
    CandidateGenerator,
    parse_references,
)
from torahcite.detection.patterns import (
    BOOK_NAME_MAP,
    CITATION_RULES,
    PatternRule,
    normalize_reference,
)

__all__ = [
    "BOOK_NAME_MAP",
    "CITATION_RULES",
    "CandidateGenerator",
    "PatternRule",
    "ReferenceExtractor",
    "normalize_reference",
    "parse_references",
]
