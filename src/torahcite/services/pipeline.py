"""Wires gateway, detectors, resolver and analyzer from Settings."""

from __future__ import annotations

from dataclasses import dataclass

from torahcite.config import Settings
from torahcite.detection.extractor import ReferenceExtractor
from torahcite.detection.generator import CandidateGenerator
from torahcite.gateway.client import SefariaGateway
from torahcite.services.session import Listener, SuggestionSession
from torahcite.suggestions.analyzer import SlidingWindowAnalyzer
from torahcite.suggestions.resolver import SuggestionResolver
from torahcite.value_objects import SourceSuggestion, TextAnalysis


@dataclass
class SuggestionPipeline:
    """Process-wide engine. Build once, share, close on shutdown."""

    settings: Settings
    gateway: SefariaGateway
    resolver: SuggestionResolver
    analyzer: SlidingWindowAnalyzer

    def new_session(
        self,
        *,
        on_suggestions: Listener[list[SourceSuggestion]] | None = None,
        on_analysis: Listener[list[TextAnalysis]] | None = None,
        on_insert: Listener[SourceSuggestion] | None = None,
    ) -> SuggestionSession:
        return SuggestionSession(
            self.resolver,
            self.analyzer,
            on_suggestions=on_suggestions,
            on_analysis=on_analysis,
            on_insert=on_insert,
            min_text_length=self.settings.min_text_length,
        )

    async def aclose(self) -> None:
        await self.gateway.aclose()


def create_pipeline(
    settings: Settings | None = None,
    *,
    gateway: SefariaGateway | None = None,
) -> SuggestionPipeline:
    cfg = settings or Settings()
    gw = gateway or SefariaGateway(cfg)
    generator = (
        CandidateGenerator(cfg) if cfg.candidate_generator_enabled else None
    )
    resolver = SuggestionResolver(gw, ReferenceExtractor(), generator)
    analyzer = SlidingWindowAnalyzer(resolver, cfg)
    return SuggestionPipeline(
        settings=cfg,
        gateway=gw,
        resolver=resolver,
        analyzer=analyzer,
    )
