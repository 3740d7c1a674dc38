"""Environment-based configuration."""

from __future__ import annotations

import logging
from typing import Annotated, Any

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode

from torahcite.constants import DEFAULT_AUTH_EXEMPT_PATHS

logger = logging.getLogger(__name__)

# Provider prefix → Settings attribute holding its credential
PROVIDER_KEY_FIELDS: dict[str, str] = {
    "openai": "openai_api_key",
    "anthropic": "anthropic_api_key",
}


class Settings(BaseSettings):
    """Reads from .env file and environment variables."""

    # Text repository
    sefaria_base_url: str = "https://www.sefaria.org/api"
    http_timeout_seconds: float = 10.0
    cache_ttl_seconds: float = 300.0  # 5 minutes
    gateway_max_in_flight: int = 8
    gateway_retry_attempts: int = 3

    # LLM Provider
    anthropic_api_key: str = ""
    openai_api_key: str = ""

    # Model chain (first = primary, rest = fallbacks tried in order)
    litellm_model_chain: Annotated[list[str], NoDecode] = [
        "openai/gpt-4.1-mini",
        "anthropic/claude-3-5-haiku-latest",
    ]
    llm_timeout_seconds: int = 20
    candidate_generator_enabled: bool = True

    # Analysis
    analysis_max_concurrency: int = 4
    min_text_length: int = 10

    # Logging
    log_level: str = "INFO"

    # API
    api_key: str = ""
    api_key_exempt_paths: Annotated[list[str], NoDecode] = list(
        DEFAULT_AUTH_EXEMPT_PATHS
    )
    cors_origins: str = "http://localhost:5173"

    @field_validator(
        "litellm_model_chain", "api_key_exempt_paths", mode="before"
    )
    @classmethod
    def _parse_chain(cls, v: Any) -> Any:
        """Accept comma-separated string or JSON array."""
        if isinstance(v, str):
            return [s.strip() for s in v.split(",") if s.strip()]
        return v

    @field_validator("litellm_model_chain")
    @classmethod
    def _validate_chain(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError(
                "LITELLM_MODEL_CHAIN must contain at least one model"
            )
        seen: set[str] = set()
        dupes: list[str] = []
        for m in v:
            if m in seen:
                dupes.append(m)
            seen.add(m)
        if dupes:
            logger.warning(
                "Duplicate models in LITELLM_MODEL_CHAIN: %s",
                ", ".join(dupes),
            )
        return v

    @field_validator(
        "analysis_max_concurrency",
        "gateway_max_in_flight",
        "gateway_retry_attempts",
    )
    @classmethod
    def _at_least_one(cls, v: int) -> int:
        if v < 1:
            raise ValueError("must be at least 1")
        return v

    @field_validator("api_key_exempt_paths")
    @classmethod
    def _validate_exempt_paths(cls, v: list[str]) -> list[str]:
        bad = [p for p in v if not p.startswith("/")]
        if bad:
            raise ValueError(
                f"API_KEY_EXEMPT_PATHS entries must start with '/': {bad}"
            )
        return [p.rstrip("/") or "/" for p in v]

    @field_validator("sefaria_base_url")
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    def api_key_for(self, model: str) -> str | None:
        """Credential for a ``provider/model`` string.

        Returns ``None`` for providers this service does not manage keys
        for (litellm reads those from the environment itself), and an
        empty string when the provider is known but its key is unset.
        """
        provider = model.split("/", 1)[0] if "/" in model else ""
        field_name = PROVIDER_KEY_FIELDS.get(provider)
        if field_name is None:
            return None
        return str(getattr(self, field_name))

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "",
        "extra": "ignore",
    }
