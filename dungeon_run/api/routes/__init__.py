"""Versioned API route modules."""

from fastapi import APIRouter

from dungeon_run.api.routes.config import router as config_router
from dungeon_run.api.routes.control import router as control_router
from dungeon_run.api.routes.plan import router as plan_router
from dungeon_run.api.routes.state import router as state_router

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(state_router, tags=["State"])
api_router.include_router(plan_router, tags=["Plan"])
api_router.include_router(control_router, tags=["Control"])
api_router.include_router(config_router, tags=["Config"])

__all__ = ["api_router"]
