from fastapi import APIRouter

from app.api.auth import router as auth_router
from app.api.bot import router as bot_router
from app.api.builds import router as builds_router
from app.api.stats import router as stats_router

api_router = APIRouter(prefix="/api")
api_router.include_router(auth_router, tags=["auth"])
api_router.include_router(builds_router, prefix="/builds", tags=["builds"])
api_router.include_router(bot_router, tags=["bot"])
api_router.include_router(stats_router, tags=["stats"])
