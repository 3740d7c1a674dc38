"""Health check endpoint."""

from datetime import UTC, datetime

from fastapi import APIRouter, Depends

from torahcite import __version__
from torahcite.api.dependencies import get_pipeline
from torahcite.services.pipeline import SuggestionPipeline

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health")
async def health(
    pipeline: SuggestionPipeline = Depends(get_pipeline),
) -> dict[str, object]:
    """Liveness plus the state of the repository circuit breaker."""
    breaker_state = str(pipeline.gateway.breaker.state)  # pyright: ignore[reportUnknownMemberType]
    return {
        "status": "healthy" if breaker_state != "open" else "degraded",
        "version": __version__,
        "components": {
            "text_repository": {"circuit": breaker_state},
            "candidate_generator": {
                "enabled": pipeline.settings.candidate_generator_enabled
            },
        },
        "timestamp": datetime.now(UTC).isoformat(),
    }
