"""
Health Check Routes
===================

Kubernetes-compatible health and readiness endpoints.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Request

from api import __version__
from api.schemas import HealthResponse, HealthStatus, ReadinessResponse

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Returns the health status of the service and its graph store",
)
def health_check(request: Request) -> HealthResponse:
    """
    Health check endpoint for load balancers and monitoring.

    The service is degraded, not down, when the graph store is unreachable:
    it still answers health checks and reports retrieval failures per request.
    """
    store = request.app.state.store
    checks = {
        "api": True,
        "graph_store": store.ping(),
    }

    status = HealthStatus.HEALTHY if all(checks.values()) else HealthStatus.DEGRADED

    return HealthResponse(
        status=status,
        version=__version__,
        timestamp=datetime.now(timezone.utc),
        checks=checks,
    )


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    summary="Readiness check",
    description="Returns whether the service is ready to handle requests",
)
def readiness_check(request: Request) -> ReadinessResponse:
    """Readiness check: the agent is wired and the graph store answers."""
    state = request.app.state
    checks = {
        "agent_configured": getattr(state, "agent", None) is not None,
        "graph_store_reachable": state.store.ping(),
    }

    return ReadinessResponse(
        ready=all(checks.values()),
        checks=checks,
    )


@router.get(
    "/live",
    summary="Liveness check",
    description="Simple liveness check",
)
async def liveness_check() -> dict:
    return {"status": "ok"}
