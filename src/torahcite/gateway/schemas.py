"""Text repository payloads and their parsers.

The parsers are strict about shape: anything unexpected raises
ValueError, which the gateway turns into a miss.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, cast


@dataclass(frozen=True)
class CanonicalText:
    """One reference fetched by exact lookup."""

    ref: str
    localized_ref: str
    body_text: str
    localized_body_text: str
    book: str
    category: str


@dataclass(frozen=True)
class SearchHit:
    """One relevance-ranked search result."""

    ref: str
    localized_ref: str
    snippet_text: str
    category: str


def join_segments(value: Any) -> str:
    """Join passage segments with single spaces.

    Segments arrive as a string, a list of strings, or (for multi-chapter
    ranges) nested lists; nesting is flattened in order. Empty segments
    are skipped.
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        parts = [join_segments(v) for v in cast(list[Any], value)]
        return " ".join(p for p in parts if p)
    raise ValueError(f"unexpected segment type: {type(value).__name__}")


def _str_field(data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"field {key!r} is not a string")
    return value


def parse_canonical_text(payload: Any) -> CanonicalText:
    """Build a CanonicalText from a ``/texts/{ref}`` response body.

    The repository answers unknown refs with HTTP 200 and an ``error``
    key, so that is rejected here along with malformed bodies.
    """
    if not isinstance(payload, dict):
        raise ValueError("text payload is not an object")
    data = cast(dict[str, Any], payload)
    if "error" in data:
        raise LookupError(str(data["error"]))
    ref = _str_field(data, "ref")
    if not ref:
        raise ValueError("text payload has no ref")
    return CanonicalText(
        ref=ref,
        localized_ref=_str_field(data, "heRef"),
        body_text=join_segments(data.get("text")),
        localized_body_text=join_segments(data.get("he")),
        book=_str_field(data, "book"),
        category=_str_field(data, "primary_category"),
    )


def parse_search_hits(payload: Any) -> list[SearchHit]:
    """Build SearchHits from a ``/search-wrapper`` response body.

    A body without ``text_hits`` is a legitimate empty result. Individual
    hits without a ref are skipped.
    """
    if not isinstance(payload, dict):
        raise ValueError("search payload is not an object")
    raw_hits = cast(dict[str, Any], payload).get("text_hits") or []
    if not isinstance(raw_hits, list):
        raise ValueError("text_hits is not a list")

    hits: list[SearchHit] = []
    for raw in cast(list[Any], raw_hits):
        if not isinstance(raw, dict):
            continue
        item = cast(dict[str, Any], raw)
        ref = item.get("ref")
        if not isinstance(ref, str) or not ref:
            continue
        hits.append(
            SearchHit(
                ref=ref,
                localized_ref=str(item.get("heRef") or ""),
                snippet_text=join_segments(item.get("text")),
                category=str(item.get("primary_category") or ""),
            )
        )
    return hits
