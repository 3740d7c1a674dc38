"""Citation pattern rules and book-name normalization."""

from __future__ import annotations

import re
from dataclasses import dataclass

from torahcite.constants import Confidence


@dataclass(frozen=True)
class PatternRule:
    """A citation regex and the confidence every match receives."""

    name: str
    regex: re.Pattern[str]
    confidence: float


_PENTATEUCH = (
    "Genesis|Exodus|Leviticus|Numbers|Deuteronomy"
    "|Bereishit|Shemot|Vayikra|Bamidbar|Devarim"
)

_COMMENTATORS = "Rashi|Tosafot|Ramban|Ibn Ezra"

_HEBREW_TRACTATES = (
    "ברכות|שבת|עירובין|פסחים|יומא|סוכה|ביצה"
    "|ראש השנה|תענית|מגילה|מועד קטן|חגיגה"
)

_LATIN = re.IGNORECASE | re.ASCII

# Order matters: candidates are emitted rule by rule. Digits and Latin
# letters are ASCII only.
CITATION_RULES: tuple[PatternRule, ...] = (
    PatternRule(
        name="torah_verse",
        regex=re.compile(rf"({_PENTATEUCH})\s+(\d+):(\d+)", _LATIN),
        confidence=Confidence.TORAH_VERSE,
    ),
    PatternRule(
        name="talmud_folio",
        regex=re.compile(r"([A-Za-z]+)\s+(\d+[ab])", _LATIN),
        confidence=Confidence.TALMUD_FOLIO,
    ),
    PatternRule(
        name="mishnah",
        regex=re.compile(
            r"(Mishnah|Mishna)\s+([A-Za-z]+)\s+(\d+):(\d+)", _LATIN
        ),
        confidence=Confidence.MISHNAH,
    ),
    PatternRule(
        name="commentary",
        regex=re.compile(
            rf"({_COMMENTATORS})\s+on\s+([A-Za-z\s]+\d+:\d+)",
            _LATIN,
        ),
        confidence=Confidence.COMMENTARY,
    ),
    PatternRule(
        name="hebrew_tractate",
        regex=re.compile(rf"({_HEBREW_TRACTATES})\s+(\d+[אב])", re.ASCII),
        confidence=Confidence.HEBREW_TRACTATE,
    ),
)

# Transliterated (and differently-cased English) names → repository titles
BOOK_NAME_MAP: dict[str, str] = {
    "Genesis": "Genesis",
    "Bereishit": "Genesis",
    "Exodus": "Exodus",
    "Shemot": "Exodus",
    "Leviticus": "Leviticus",
    "Vayikra": "Leviticus",
    "Numbers": "Numbers",
    "Bamidbar": "Numbers",
    "Deuteronomy": "Deuteronomy",
    "Devarim": "Deuteronomy",
}

_BOOK_NAME_RE = re.compile(
    r"\b(" + "|".join(map(re.escape, BOOK_NAME_MAP)) + r")\b",
    re.IGNORECASE,
)
_BOOK_NAME_LOOKUP = {k.lower(): v for k, v in BOOK_NAME_MAP.items()}


def normalize_reference(ref: str) -> str:
    """Replace known book-name variants with canonical English titles.

    Matching is case-insensitive and whole-word; names not in the table
    pass through untouched.
    """
    return _BOOK_NAME_RE.sub(
        lambda m: _BOOK_NAME_LOOKUP[m.group(0).lower()], ref
    )
