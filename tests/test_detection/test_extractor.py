"""Tests for pattern-based reference extraction."""

from __future__ import annotations

from torahcite.constants import CandidateOrigin, Confidence
from torahcite.detection.extractor import ReferenceExtractor
from torahcite.detection.patterns import (
    CITATION_RULES,
    normalize_reference,
)


def _refs(text: str) -> list[str]:
    return [c.ref for c in ReferenceExtractor().detect(text)]


class TestNormalizeReference:
    def test_transliterated_name_mapped(self) -> None:
        assert normalize_reference("Shemot 3:14") == "Exodus 3:14"

    def test_case_insensitive(self) -> None:
        assert normalize_reference("BAMIDBAR 1:1") == "Numbers 1:1"
        assert normalize_reference("genesis 1:1") == "Genesis 1:1"

    def test_whole_word_only(self) -> None:
        assert normalize_reference("Genesisx 1:1") == "Genesisx 1:1"

    def test_unknown_names_untouched(self) -> None:
        assert normalize_reference("Berakhot 2a") == "Berakhot 2a"


class TestDetect:
    def test_torah_verse(self) -> None:
        [candidate] = ReferenceExtractor().detect("See Genesis 1:1 here")
        assert candidate.ref == "Genesis 1:1"
        assert candidate.matched_text == "Genesis 1:1"
        assert candidate.confidence == Confidence.TORAH_VERSE
        assert candidate.origin == CandidateOrigin.PATTERN

    def test_transliterated_book_normalized(self) -> None:
        [candidate] = ReferenceExtractor().detect("as in Bereishit 1:1")
        assert candidate.ref == "Genesis 1:1"
        assert candidate.matched_text == "Bereishit 1:1"

    def test_talmud_folio(self) -> None:
        [candidate] = ReferenceExtractor().detect("the Gemara in Berakhot 2a")
        assert candidate.ref == "Berakhot 2a"
        assert candidate.confidence == Confidence.TALMUD_FOLIO

    def test_mishnah(self) -> None:
        [candidate] = ReferenceExtractor().detect("Mishnah Berakhot 1:1")
        assert candidate.ref == "Mishnah Berakhot 1:1"
        assert candidate.confidence == Confidence.MISHNAH

    def test_hebrew_tractate(self) -> None:
        [candidate] = ReferenceExtractor().detect("עיין ברכות 2א")
        assert candidate.ref == "ברכות 2א"
        assert candidate.confidence == Confidence.HEBREW_TRACTATE

    def test_commentary_overlaps_verse(self) -> None:
        """One stretch of text can yield candidates from several rules."""
        candidates = ReferenceExtractor().detect("Rashi on Genesis 1:1")
        assert [c.ref for c in candidates] == [
            "Genesis 1:1",
            "Rashi on Genesis 1:1",
        ]
        assert candidates[1].confidence == Confidence.COMMENTARY

    def test_rule_order_then_match_order(self) -> None:
        text = "Shabbat 31a, Exodus 20:2, Berakhot 2a and Genesis 1:1"
        assert _refs(text) == [
            "Exodus 20:2",
            "Genesis 1:1",
            "Shabbat 31a",
            "Berakhot 2a",
        ]

    def test_plain_prose_has_no_candidates(self) -> None:
        assert _refs("In the beginning there was nothing to cite") == []

    def test_non_ascii_digits_ignored(self) -> None:
        assert _refs("Genesis ١:١ and Shabbat ٣١a") == []
        assert _refs("עיין ברכות ٢א") == []

    def test_non_ascii_letters_ignored(self) -> None:
        # Kelvin sign and long s casefold to ASCII letters
        assert _refs("Mishnah Kelim 1:1") == []
        assert _refs("Rashi on ſhemot 3:14") == []

    def test_empty_text(self) -> None:
        assert _refs("") == []

    def test_deterministic(self) -> None:
        text = "Genesis 1:1 then Berakhot 2a"
        extractor = ReferenceExtractor()
        assert extractor.detect(text) == extractor.detect(text)

    def test_custom_rules(self) -> None:
        extractor = ReferenceExtractor(rules=CITATION_RULES[1:2])
        assert [c.ref for c in extractor.detect("Genesis 1:1 Yoma 2a")] == [
            "Yoma 2a"
        ]
