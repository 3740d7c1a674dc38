"""Shared test fixtures: fake gateway, resolver, no real network."""

import os

# Force demo API keys for all tests; no real LLM calls.
# Set unconditionally at import time so real keys in the shell
# environment never reach Settings() during a test run.
os.environ["ANTHROPIC_API_KEY"] = "for-demo-purposes-only"
os.environ["OPENAI_API_KEY"] = "for-demo-purposes-only"

from typing import Any

import pytest
from circuitbreaker import CircuitBreakerMonitor
from tenacity import wait_none

from torahcite.config import Settings
from torahcite.gateway.fakes import FakeTextGateway, make_hit, make_text
from torahcite.llm._llm_call import _breaker_registry, guarded_llm_call
from torahcite.suggestions.resolver import SuggestionResolver


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class StubGenerator:
    """Returns canned references and records what it was asked."""

    def __init__(self, refs: list[str] | None = None) -> None:
        self.refs = list(refs or [])
        self.calls: list[str] = []

    async def suggest_references(self, text: str) -> list[str]:
        self.calls.append(text)
        return list(self.refs)


@pytest.fixture(autouse=True)
def _reset_llm_breakers() -> None:
    """Reset LLM circuit breakers between tests."""
    _breaker_registry.clear()
    for cb in CircuitBreakerMonitor.get_circuits():
        cb.reset()  # type: ignore[union-attr]


@pytest.fixture(autouse=True)
def _disable_llm_retry_wait() -> Any:
    """Disable tenacity wait time for fast tests."""
    original_wait = guarded_llm_call.retry.wait  # type: ignore[union-attr]
    guarded_llm_call.retry.wait = wait_none()  # type: ignore[union-attr]
    yield
    guarded_llm_call.retry.wait = original_wait  # type: ignore[union-attr]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        sefaria_base_url="http://sefaria.test/api",
        gateway_retry_attempts=1,
        candidate_generator_enabled=False,
        litellm_model_chain=["openai/test-model"],
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def gateway() -> FakeTextGateway:
    """Gateway knowing Genesis 1:1 and one Berakhot search hit."""
    return FakeTextGateway(
        texts={
            "Genesis 1:1": make_text(
                "Genesis 1:1",
                body="In the beginning God created the heaven and the earth.",
                localized_ref="בראשית א׳:א׳",
                localized_body="בְּרֵאשִׁית בָּרָא אֱלֹהִים",
                book="Genesis",
            ),
        },
        search_hits={
            "Berakhot 2a": [make_hit("Berakhot 2a:1")],
        },
    )


@pytest.fixture
def resolver(gateway: FakeTextGateway) -> SuggestionResolver:
    return SuggestionResolver(gateway)
