"""Tests for the HTTP API using httpx AsyncClient."""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any
from urllib.parse import unquote

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from torahcite.api.middleware.auth import is_exempt
from torahcite.config import Settings
from torahcite.gateway.client import SefariaGateway
from torahcite.main import app
from torahcite.services.pipeline import SuggestionPipeline, create_pipeline

_GENESIS: dict[str, Any] = {
    "ref": "Genesis 1:1",
    "heRef": "בראשית א׳:א׳",
    "text": "In the beginning God created the heaven and the earth.",
    "he": "בְּרֵאשִׁית בָּרָא אֱלֹהִים",
    "primary_category": "Tanakh",
    "book": "Genesis",
}


def _repository(request: httpx.Request) -> httpx.Response:
    """Stand-in for the text repository: one verse, one search hit."""
    path = unquote(request.url.raw_path.decode("ascii")).split("?")[0]
    if path == "/api/texts/Genesis 1:1":
        return httpx.Response(200, json=_GENESIS)
    if path.startswith("/api/texts/"):
        return httpx.Response(404)
    if request.url.params.get("q") == "Berakhot 2a":
        return httpx.Response(
            200,
            json={
                "text_hits": [
                    {"ref": "Berakhot 2a:1", "primary_category": "Talmud"}
                ]
            },
        )
    return httpx.Response(200, json={"text_hits": []})


def _install(settings: Settings) -> SuggestionPipeline:
    gateway = SefariaGateway(
        settings,
        client=httpx.AsyncClient(transport=httpx.MockTransport(_repository)),
    )
    pipeline = create_pipeline(settings, gateway=gateway)
    app.state.settings = settings
    app.state.pipeline = pipeline
    return pipeline


@pytest.fixture
async def client(settings: Settings) -> AsyncIterator[AsyncClient]:
    """API client over a mocked repository (no network, no lifespan)."""
    _install(settings)
    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport, base_url="http://test"
    ) as c:
        yield c


class TestHealthRoute:
    async def test_health(self, client: AsyncClient) -> None:
        resp = await client.get("/api/health")
        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "healthy"
        assert body["components"]["text_repository"]["circuit"] == "closed"
        assert body["components"]["candidate_generator"]["enabled"] is False
        assert "timestamp" in body


class TestSuggestionRoutes:
    async def test_direct_suggestion(self, client: AsyncClient) -> None:
        resp = await client.post(
            "/api/suggestions", json={"text": "As it says in Genesis 1:1"}
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["metadata"]["count"] == 1
        [item] = body["data"]
        assert item["id"] == "direct-Genesis 1:1"
        assert item["localized_ref"] == "בראשית א׳:א׳"
        assert item["confidence"] == 0.9

    async def test_search_fallback(self, client: AsyncClient) -> None:
        resp = await client.post(
            "/api/suggestions", json={"text": "the Gemara in Berakhot 2a"}
        )
        [item] = resp.json()["data"]
        assert item["id"] == "search-Berakhot 2a:1"
        assert item["confidence"] == pytest.approx(0.64)

    async def test_nothing_found(self, client: AsyncClient) -> None:
        resp = await client.post(
            "/api/suggestions", json={"text": "nothing to see here"}
        )
        assert resp.status_code == 200
        assert resp.json()["data"] == []

    async def test_missing_text_rejected(self, client: AsyncClient) -> None:
        resp = await client.post("/api/suggestions", json={})
        assert resp.status_code == 422

    async def test_oversized_text_rejected(
        self, client: AsyncClient
    ) -> None:
        resp = await client.post(
            "/api/suggestions", json={"text": "x" * 50_001}
        )
        assert resp.status_code == 422


class TestAnalyzeRoute:
    async def test_analysis_spans(self, client: AsyncClient) -> None:
        resp = await client.post(
            "/api/analyze", json={"text": "See Genesis 1:1 now"}
        )
        assert resp.status_code == 200
        [item] = resp.json()["data"]
        assert item["original_text"] == "See Genesis 1:1"
        assert item["position"] == {"start": 0, "end": 15}
        assert item["detected_sources"][0]["ref"] == "Genesis 1:1"

    async def test_empty_document(self, client: AsyncClient) -> None:
        resp = await client.post("/api/analyze", json={"text": ""})
        assert resp.json()["data"] == []


class TestApiKey:
    @pytest.fixture
    async def secured(self, settings: Settings) -> AsyncIterator[AsyncClient]:
        _install(settings.model_copy(update={"api_key": "s3cret"}))
        transport = ASGITransport(app=app)
        async with AsyncClient(
            transport=transport, base_url="http://test"
        ) as c:
            yield c

    async def test_missing_key_rejected(self, secured: AsyncClient) -> None:
        resp = await secured.post(
            "/api/suggestions", json={"text": "Genesis 1:1"}
        )
        assert resp.status_code == 401
        assert resp.json()["success"] is False

    async def test_valid_key_accepted(self, secured: AsyncClient) -> None:
        resp = await secured.post(
            "/api/suggestions",
            json={"text": "Genesis 1:1"},
            headers={"X-API-Key": "s3cret"},
        )
        assert resp.status_code == 200

    async def test_health_exempt(self, secured: AsyncClient) -> None:
        resp = await secured.get("/api/health")
        assert resp.status_code == 200

    async def test_rejection_uses_envelope(
        self, secured: AsyncClient
    ) -> None:
        resp = await secured.post(
            "/api/analyze",
            json={"text": "Genesis 1:1"},
            headers={"X-API-Key": "wrong"},
        )
        assert resp.status_code == 401
        assert resp.headers["www-authenticate"] == "X-API-Key"
        assert resp.json() == {
            "success": False,
            "data": None,
            "error": "Invalid API key",
            "metadata": {"header": "X-API-Key"},
        }

    async def test_missing_key_message(self, secured: AsyncClient) -> None:
        resp = await secured.post(
            "/api/suggestions", json={"text": "Genesis 1:1"}
        )
        assert resp.json()["error"] == "Missing X-API-Key header"

    async def test_exempt_paths_from_settings(
        self, settings: Settings
    ) -> None:
        _install(
            settings.model_copy(
                update={
                    "api_key": "s3cret",
                    "api_key_exempt_paths": ["/api/suggestions"],
                }
            )
        )
        async with AsyncClient(
            transport=ASGITransport(app=app), base_url="http://test"
        ) as c:
            open_resp = await c.post(
                "/api/suggestions", json={"text": "Genesis 1:1"}
            )
            health_resp = await c.get("/api/health")

        assert open_resp.status_code == 200
        assert health_resp.status_code == 401


class TestIsExempt:
    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("/api/health", True),
            ("/api/health/deep", True),
            ("/api/healthz", False),
            ("/api/suggestions", False),
        ],
    )
    def test_segment_boundary(self, path: str, expected: bool) -> None:
        assert is_exempt(path, ["/api/health"]) is expected
