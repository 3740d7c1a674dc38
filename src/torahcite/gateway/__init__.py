"""Remote text repository access: lookup, search, result cache."""

from torahcite.gateway.cache import TTLCache
from torahcite.gateway.client import SefariaGateway
from torahcite.gateway.protocols import TextGateway
from torahcite.gateway.schemas import (
    CanonicalText,
    SearchHit,
    parse_canonical_text,
    parse_search_hits,
)

__all__ = [
    "CanonicalText",
    "SearchHit",
    "SefariaGateway",
    "TTLCache",
    "TextGateway",
    "parse_canonical_text",
    "parse_search_hits",
]
