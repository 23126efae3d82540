"""Central API router composition.

This module is responsible for mounting individual route modules on the main app
router and providing a single import point for `FastAPI.include_router(...)`.
"""

from fastapi import APIRouter

from .auth import router as auth_router
from .games import router as games_router
from .players import router as players_router
from .public import router as public_router
from .teams import router as teams_router

router = APIRouter(prefix="/api/v1", tags=["v1"])

router.include_router(auth_router)
router.include_router(teams_router)
router.include_router(players_router)
router.include_router(games_router)
router.include_router(public_router)
