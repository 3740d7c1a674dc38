"""Tests for Settings parsing and validators."""

from __future__ import annotations

import logging

import pytest

from torahcite.config import Settings


class TestModelChainParsing:
    def test_comma_separated_string_parsed_to_list(self) -> None:
        s = Settings(litellm_model_chain="model-a,model-b")  # type: ignore[arg-type]
        assert s.litellm_model_chain == ["model-a", "model-b"]

    def test_comma_separated_with_spaces(self) -> None:
        s = Settings(litellm_model_chain="model-a , model-b")  # type: ignore[arg-type]
        assert s.litellm_model_chain == ["model-a", "model-b"]

    def test_json_list_passthrough(self) -> None:
        s = Settings(litellm_model_chain=["model-a", "model-b"])
        assert s.litellm_model_chain == ["model-a", "model-b"]

    def test_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(
            "LITELLM_MODEL_CHAIN", "openai/a, anthropic/b"
        )
        assert Settings().litellm_model_chain == ["openai/a", "anthropic/b"]


class TestModelChainValidation:
    def test_empty_chain_raises(self) -> None:
        with pytest.raises(ValueError, match="at least one model"):
            Settings(litellm_model_chain=[])

    def test_duplicate_models_warns(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING, logger="torahcite.config"):
            s = Settings(
                litellm_model_chain=["model-a", "model-a", "model-b"]
            )
        assert "Duplicate models in LITELLM_MODEL_CHAIN" in caplog.text
        assert s.litellm_model_chain == ["model-a", "model-a", "model-b"]


class TestRepositorySettings:
    def test_defaults(self) -> None:
        s = Settings()
        assert s.sefaria_base_url == "https://www.sefaria.org/api"
        assert s.cache_ttl_seconds == 300.0
        assert s.min_text_length == 10

    def test_trailing_slash_stripped(self) -> None:
        s = Settings(sefaria_base_url="http://localhost:8000/api/")
        assert s.sefaria_base_url == "http://localhost:8000/api"

    @pytest.mark.parametrize(
        "field",
        [
            "analysis_max_concurrency",
            "gateway_max_in_flight",
            "gateway_retry_attempts",
        ],
    )
    def test_limits_must_be_positive(self, field: str) -> None:
        with pytest.raises(ValueError, match="at least 1"):
            Settings(**{field: 0})


class TestApiKeyFor:
    def test_known_provider(self) -> None:
        s = Settings(openai_api_key="sk-test")
        assert s.api_key_for("openai/gpt-4.1-mini") == "sk-test"

    def test_known_provider_without_key(self) -> None:
        s = Settings(anthropic_api_key="")
        assert s.api_key_for("anthropic/claude-3-5-haiku-latest") == ""

    def test_unmanaged_provider(self) -> None:
        assert Settings().api_key_for("ollama/llama3") is None
        assert Settings().api_key_for("gpt-4o") is None


class TestApiKeyExemptPaths:
    def test_defaults_cover_health_and_docs(self) -> None:
        paths = Settings().api_key_exempt_paths
        assert "/api/health" in paths
        assert "/api/docs" in paths

    def test_comma_separated_from_environment(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("API_KEY_EXEMPT_PATHS", "/api/health, /metrics/")
        assert Settings().api_key_exempt_paths == ["/api/health", "/metrics"]

    def test_relative_path_rejected(self) -> None:
        with pytest.raises(ValueError, match="must start with"):
            Settings(api_key_exempt_paths=["api/health"])
