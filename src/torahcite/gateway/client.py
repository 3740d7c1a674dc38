"""HTTP client for the Sefaria text repository.

Every public call returns an Outcome and never raises: transport errors,
non-2xx answers and malformed bodies all degrade to a miss so the
resolver can move on to its next fallback tier.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any
from urllib.parse import quote

import httpx
from circuitbreaker import (  # pyright: ignore[reportUnknownVariableType]
    CircuitBreaker,
    CircuitBreakerError,
)
from tenacity import (
    AsyncRetrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential_jitter,
)

from torahcite import __version__
from torahcite.config import Settings
from torahcite.constants import (
    CB_GATEWAY_FAILURE_THRESHOLD,
    CB_GATEWAY_RECOVERY_TIMEOUT,
    ERROR_TRUNCATION_CHARS,
    GATEWAY_RETRY_INITIAL_WAIT,
    GATEWAY_RETRY_MAX_WAIT,
    search_cache_key,
    text_cache_key,
)
from torahcite.gateway.cache import Clock, TTLCache
from torahcite.gateway.schemas import (
    CanonicalText,
    SearchHit,
    parse_canonical_text,
    parse_search_hits,
)
from torahcite.resilience.coalesce import RequestCoalescer
from torahcite.resilience.errors import (
    ErrorClass,
    classify_error,
    is_retryable,
    status_code_of,
)
from torahcite.resilience.outcome import Outcome

logger = logging.getLogger(__name__)

# Characters encodeURIComponent leaves alone besides the unreserved set
_REF_SAFE_CHARS = "!*'()"


def _counts_as_outage(
    thrown_type: type, thrown_value: BaseException
) -> bool:
    """Return True if the failure should count against the breaker.

    The circuitbreaker library calls this with (thrown_type, thrown_value).
    Unknown refs (404) and other client errors say nothing about the
    repository's health, so only retryable failures are tracked.
    """
    return is_retryable(thrown_value)


class SefariaGateway:
    """Cached, retrying, circuit-protected access to the text repository.

    Construct once per process and share it: the cache, the in-flight
    limit and the breaker all live on the instance.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        client: httpx.AsyncClient | None = None,
        cache: TTLCache | None = None,
        clock: Clock | None = None,
    ) -> None:
        cfg = settings or Settings()
        self._base_url = cfg.sefaria_base_url
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=cfg.http_timeout_seconds,
            headers={"User-Agent": f"torahcite/{__version__}"},
        )
        if cache is None:
            cache = (
                TTLCache(cfg.cache_ttl_seconds, clock)
                if clock is not None
                else TTLCache(cfg.cache_ttl_seconds)
            )
        self._cache = cache
        self._limiter = asyncio.Semaphore(cfg.gateway_max_in_flight)
        self._coalescer = RequestCoalescer[Outcome[Any]]()
        self._retry_attempts = cfg.gateway_retry_attempts
        self._retry_wait: Any = wait_exponential_jitter(
            initial=GATEWAY_RETRY_INITIAL_WAIT, max=GATEWAY_RETRY_MAX_WAIT
        )
        self._breaker = CircuitBreaker(  # pyright: ignore[reportUnknownMemberType]
            failure_threshold=CB_GATEWAY_FAILURE_THRESHOLD,
            recovery_timeout=CB_GATEWAY_RECOVERY_TIMEOUT,
            expected_exception=_counts_as_outage,
            name=f"sefaria_gateway_{id(self):x}",
        )

    @property
    def cache(self) -> TTLCache:
        return self._cache

    @property
    def breaker(self) -> CircuitBreaker:  # pyright: ignore[reportUnknownParameterType]
        return self._breaker

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> SefariaGateway:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # ── Public API ─────────────────────────────────────────

    async def fetch_by_reference(self, ref: str) -> Outcome[CanonicalText]:
        """Look up one reference, serving from cache when fresh."""
        key = text_cache_key(ref)
        cached: CanonicalText | None = self._cache.get(key)
        if cached is not None:
            logger.debug("event=cache_hit key=%s", key)
            return Outcome.ok(cached)
        return await self._coalescer.run(
            key, lambda: self._fetch_text(ref, key)
        )

    async def search(
        self, query: str, limit: int = 10
    ) -> Outcome[list[SearchHit]]:
        """Relevance search; failures are not cached."""
        if not query.strip():
            return Outcome.ok([])
        key = search_cache_key(query, limit)
        cached: list[SearchHit] | None = self._cache.get(key)
        if cached is not None:
            logger.debug("event=cache_hit key=%s", key)
            return Outcome.ok(cached)
        return await self._coalescer.run(
            key, lambda: self._run_search(query, limit, key)
        )

    # ── Internals ──────────────────────────────────────────

    async def _fetch_text(
        self, ref: str, key: str
    ) -> Outcome[CanonicalText]:
        url = f"{self._base_url}/texts/{quote(ref, safe=_REF_SAFE_CHARS)}"
        try:
            payload = await self._get_json(url)
        except CircuitBreakerError:
            logger.warning(
                "event=circuit_open component=gateway action=skip ref=%s",
                ref,
            )
            return Outcome.failed(ErrorClass.SERVER)
        except Exception as exc:
            if status_code_of(exc) == 404:
                logger.info("event=text_not_found ref=%s", ref)
                return Outcome.empty()
            return self._absorb(exc, "fetch_text", ref)

        try:
            text = parse_canonical_text(payload)
        except LookupError as exc:
            logger.info(
                "event=text_not_found ref=%s reason=%s",
                ref,
                str(exc)[:ERROR_TRUNCATION_CHARS],
            )
            return Outcome.empty()
        except ValueError as exc:
            return self._absorb(exc, "parse_text", ref)

        self._cache.set(key, text)
        return Outcome.ok(text)

    async def _run_search(
        self, query: str, limit: int, key: str
    ) -> Outcome[list[SearchHit]]:
        params: dict[str, str | int] = {
            "q": query,
            "tab": "text",
            "tvar": 1,
            "tsort": "relevance",
            "svar": 1,
            "ssort": "relevance",
            "filters": "",
            "size": limit,
        }
        try:
            payload = await self._get_json(
                f"{self._base_url}/search-wrapper", params
            )
            hits = parse_search_hits(payload)
        except CircuitBreakerError:
            logger.warning(
                "event=circuit_open component=gateway action=skip query=%s",
                query[:ERROR_TRUNCATION_CHARS],
            )
            return Outcome.failed(ErrorClass.SERVER)
        except Exception as exc:
            return self._absorb(exc, "search", query)

        self._cache.set(key, hits)
        return Outcome.ok(hits)

    async def _get_json(
        self,
        url: str,
        params: dict[str, str | int] | None = None,
    ) -> Any:
        """GET with retry on transient failures, guarded by the breaker."""
        breaker = self._breaker
        if breaker.opened:  # pyright: ignore[reportUnknownMemberType]
            raise CircuitBreakerError(breaker)  # pyright: ignore[reportUnknownArgumentType]

        response: httpx.Response | None = None
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self._retry_attempts),
            wait=self._retry_wait,
            retry=retry_if_exception(is_retryable),
            reraise=True,
        ):
            with attempt:
                async with self._limiter:
                    with breaker:  # pyright: ignore[reportUnknownMemberType]
                        response = await self._client.get(
                            url, params=params
                        )
                        response.raise_for_status()

        if response is None:
            raise RuntimeError("unreachable: no response after retry")
        return response.json()

    def _absorb(
        self, exc: BaseException, operation: str, subject: str
    ) -> Outcome[Any]:
        error_class = classify_error(exc)
        logger.warning(
            "event=gateway_failed op=%s class=%s subject=%s error=%s",
            operation,
            error_class.value,
            subject[:ERROR_TRUNCATION_CHARS],
            str(exc)[:ERROR_TRUNCATION_CHARS],
        )
        return Outcome.failed(error_class)
