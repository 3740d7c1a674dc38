"""Protocol-based gateway interface.

SefariaGateway satisfies this structurally (no inheritance). Test
doubles can be plain classes matching the same signatures.
"""

from typing import Protocol

from torahcite.gateway.schemas import CanonicalText, SearchHit
from torahcite.resilience.outcome import Outcome


class TextGateway(Protocol):
    async def fetch_by_reference(
        self, ref: str
    ) -> Outcome[CanonicalText]: ...
    async def search(
        self, query: str, limit: int
    ) -> Outcome[list[SearchHit]]: ...
