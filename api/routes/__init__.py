"""API Routes."""

from api.routes.ask import router as ask_router
from api.routes.health import router as health_router
from api.routes.seed import router as seed_router

__all__ = ["ask_router", "health_router", "seed_router"]
