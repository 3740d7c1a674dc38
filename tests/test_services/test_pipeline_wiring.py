"""Tests for pipeline construction from Settings."""

from __future__ import annotations

from torahcite.config import Settings
from torahcite.detection.generator import CandidateGenerator
from torahcite.gateway.client import SefariaGateway
from torahcite.gateway.fakes import FakeTextGateway
from torahcite.services.pipeline import create_pipeline


async def test_generator_disabled_by_settings(
    settings: Settings, gateway: FakeTextGateway
) -> None:
    pipeline = create_pipeline(settings, gateway=gateway)  # type: ignore[arg-type]
    assert pipeline.resolver._generator is None


async def test_generator_enabled_by_settings(
    settings: Settings, gateway: FakeTextGateway
) -> None:
    cfg = settings.model_copy(update={"candidate_generator_enabled": True})
    pipeline = create_pipeline(cfg, gateway=gateway)  # type: ignore[arg-type]
    assert isinstance(pipeline.resolver._generator, CandidateGenerator)


async def test_default_gateway_built_from_settings(
    settings: Settings,
) -> None:
    pipeline = create_pipeline(settings)
    try:
        assert isinstance(pipeline.gateway, SefariaGateway)
        assert pipeline.gateway.cache.ttl_seconds == settings.cache_ttl_seconds
    finally:
        await pipeline.aclose()


async def test_session_uses_configured_min_length(
    settings: Settings, gateway: FakeTextGateway
) -> None:
    cfg = settings.model_copy(update={"min_text_length": 0})
    pipeline = create_pipeline(cfg, gateway=gateway)  # type: ignore[arg-type]
    received: list[object] = []
    session = pipeline.new_session(on_suggestions=received.append)

    assert await session.request_suggestions("Genesis 1:1") is not None
    assert len(received) == 1


async def test_aclose_closes_gateway(
    settings: Settings, gateway: FakeTextGateway
) -> None:
    pipeline = create_pipeline(settings, gateway=gateway)  # type: ignore[arg-type]
    await pipeline.aclose()
    assert gateway.closed
