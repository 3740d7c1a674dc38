"""In-memory fake gateway for testing.

Dict-backed implementation of the TextGateway protocol. No HTTP, no
cache: every call is recorded so tests can assert on traffic.
"""

from __future__ import annotations

from torahcite.gateway.schemas import CanonicalText, SearchHit
from torahcite.resilience.errors import ErrorClass
from torahcite.resilience.outcome import Outcome


class FakeTextGateway:
    """Dict-backed TextGateway for testing."""

    def __init__(
        self,
        texts: dict[str, CanonicalText] | None = None,
        search_hits: dict[str, list[SearchHit]] | None = None,
        *,
        unreachable: bool = False,
    ) -> None:
        self.texts = dict(texts or {})
        self.search_hits = dict(search_hits or {})
        self.unreachable = unreachable
        self.fetch_calls: list[str] = []
        self.search_calls: list[tuple[str, int]] = []
        self.closed = False

    async def fetch_by_reference(self, ref: str) -> Outcome[CanonicalText]:
        self.fetch_calls.append(ref)
        if self.unreachable:
            return Outcome.failed(ErrorClass.TRANSIENT)
        text = self.texts.get(ref)
        if text is None:
            return Outcome.empty()
        return Outcome.ok(text)

    async def search(
        self, query: str, limit: int = 10
    ) -> Outcome[list[SearchHit]]:
        self.search_calls.append((query, limit))
        if self.unreachable:
            return Outcome.failed(ErrorClass.TRANSIENT)
        return Outcome.ok(list(self.search_hits.get(query, []))[:limit])

    async def aclose(self) -> None:
        self.closed = True


def make_text(
    ref: str,
    *,
    body: str = "",
    localized_ref: str = "",
    localized_body: str = "",
    book: str | None = None,
    category: str = "Tanakh",
) -> CanonicalText:
    """CanonicalText with sensible defaults for tests."""
    return CanonicalText(
        ref=ref,
        localized_ref=localized_ref,
        body_text=body or f"Text of {ref}",
        localized_body_text=localized_body,
        book=book if book is not None else ref.rsplit(" ", 1)[0],
        category=category,
    )


def make_hit(
    ref: str,
    *,
    snippet: str = "",
    localized_ref: str = "",
    category: str = "Talmud",
) -> SearchHit:
    """SearchHit with sensible defaults for tests."""
    return SearchHit(
        ref=ref,
        localized_ref=localized_ref,
        snippet_text=snippet or f"Snippet of {ref}",
        category=category,
    )
