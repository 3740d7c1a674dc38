"""LLM-assisted candidate generation.

Asks a completion model which references the author is in the middle of
typing. Entirely advisory: any failure (no credential, transport error,
open circuit, unparseable answer) yields an empty list and the resolver
falls back to pattern detection.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, cast

from circuitbreaker import CircuitBreakerError

from torahcite.config import Settings
from torahcite.constants import MAX_GENERATED_REFERENCES
from torahcite.llm._llm_call import guarded_llm_call
from torahcite.prompts import (
    CANDIDATE_GENERATOR_PROMPT,
    build_generator_prompt,
)

logger = logging.getLogger(__name__)

_CODE_FENCE_RE = re.compile(
    r"^```[A-Za-z0-9_-]*\s*\n?(.*?)\n?\s*```$", re.DOTALL
)


def strip_code_fence(raw: str) -> str:
    """Remove one surrounding ``` fence (with optional language tag)."""
    stripped = raw.strip()
    match = _CODE_FENCE_RE.match(stripped)
    if match:
        return match.group(1).strip()
    return stripped


def parse_references(raw: str) -> list[str]:
    """Parse a generator answer into reference strings.

    Accepts a bare JSON array of strings or an object with a
    ``references`` array, optionally fenced. Any other shape gives [].
    Blank and non-string items are dropped; duplicates keep the first.
    """
    try:
        data: Any = json.loads(strip_code_fence(raw))
    except json.JSONDecodeError:
        logger.warning(
            "event=generator_parse_failed response_len=%d", len(raw)
        )
        return []

    if isinstance(data, dict):
        data = cast(dict[str, Any], data).get("references")
    if not isinstance(data, list):
        logger.warning("event=generator_unexpected_shape")
        return []

    refs: list[str] = []
    for item in cast(list[Any], data):
        if not isinstance(item, str):
            continue
        ref = item.strip()
        if ref and ref not in refs:
            refs.append(ref)
    return refs


def filter_completions(refs: list[str], text: str) -> list[str]:
    """Drop refs already written verbatim in ``text``; cap the count."""
    fresh = [r for r in refs if r not in text]
    return fresh[:MAX_GENERATED_REFERENCES]


class CandidateGenerator:
    """Proposes likely references via the configured model chain."""

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or Settings()

    @property
    def enabled(self) -> bool:
        return self._settings.candidate_generator_enabled

    async def suggest_references(self, text: str) -> list[str]:
        """Up to 5 references not already present in ``text``.

        Tries each model in the chain in order; models whose provider
        credential is unset are skipped. The first model that answers
        decides the result, even if its answer is unusable.
        """
        if not self.enabled or not text.strip():
            return []

        messages = [
            {"role": "system", "content": CANDIDATE_GENERATOR_PROMPT},
            {"role": "user", "content": build_generator_prompt(text)},
        ]

        for model in self._settings.litellm_model_chain:
            api_key = self._settings.api_key_for(model)
            if api_key == "":
                logger.debug(
                    "event=generator_skip_model reason=no_credential model=%s",
                    model,
                )
                continue
            try:
                result = await guarded_llm_call(
                    model,
                    messages,
                    self._settings.llm_timeout_seconds,
                    api_key=api_key,
                )
            except CircuitBreakerError:
                logger.warning(
                    "event=circuit_open model=%s component=generator",
                    model,
                )
                continue
            except Exception:
                logger.warning(
                    "event=generator_failed model=%s",
                    model,
                    exc_info=True,
                )
                continue

            refs = filter_completions(parse_references(result.content), text)
            logger.debug(
                "event=generator_complete model=%s count=%d",
                model,
                len(refs),
            )
            return refs

        return []
