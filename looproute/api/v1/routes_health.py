# looproute/api/v1/routes_health.py
from fastapi import APIRouter

from looproute.api.v1 import shared
from looproute.core.config import settings

router = APIRouter(
    prefix="/health",
    tags=["health"],
)


@router.get("/", summary="Health check")
async def health_check():
    """
    Liveness plus a glance at the planner: its state and node count.
    """
    return {
        "status": "ok",
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "planner": {
            "state": shared.orchestrator.state.value,
            "nodes": len(shared.orchestrator.nodes),
            "provider_point_limit": shared.orchestrator.settings.PROVIDER_POINT_LIMIT,
        },
    }
