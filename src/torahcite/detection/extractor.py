"""Pattern-based reference extraction."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from torahcite.constants import CandidateOrigin
from torahcite.detection.patterns import (
    CITATION_RULES,
    PatternRule,
    normalize_reference,
)
from torahcite.value_objects import Candidate

logger = logging.getLogger(__name__)


class ReferenceExtractor:
    """Scans text with an ordered rule set; no I/O, fully deterministic.

    Rules run independently, so one stretch of text can yield several
    overlapping candidates. Resolving overlaps is the analyzer's job.
    """

    def __init__(
        self, rules: Sequence[PatternRule] = CITATION_RULES
    ) -> None:
        self._rules = tuple(rules)

    @property
    def rules(self) -> tuple[PatternRule, ...]:
        return self._rules

    def detect(self, text: str) -> list[Candidate]:
        """Candidates in rule order, then match order within a rule."""
        candidates: list[Candidate] = []
        for rule in self._rules:
            for match in rule.regex.finditer(text):
                matched = match.group(0)
                candidates.append(
                    Candidate(
                        ref=normalize_reference(matched),
                        confidence=rule.confidence,
                        matched_text=matched,
                        origin=CandidateOrigin.PATTERN,
                    )
                )
        if candidates:
            logger.debug(
                "event=references_detected count=%d", len(candidates)
            )
        return candidates
