"""
Health check endpoint.
"""

from datetime import datetime, timezone

from fastapi import APIRouter

from golf_finder.models import HealthResponse
from golf_finder.services.registry import registry

router = APIRouter(prefix="/api", tags=["health"])

API_VERSION = "0.1.0"


@router.get(
    "/health",
    response_model=HealthResponse,
    operation_id="getHealth",
    summary="Health check",
)
async def get_health() -> HealthResponse:
    return HealthResponse(
        status="ok",
        version=API_VERSION,
        timestamp=datetime.now(timezone.utc),
        geocoding=registry.geocoding_enabled,
    )
