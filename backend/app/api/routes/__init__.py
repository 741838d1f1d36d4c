from fastapi import APIRouter

from app.api.routes import settings, share, stats, trades

api_router = APIRouter()
api_router.include_router(trades.router)
api_router.include_router(stats.router)
api_router.include_router(share.router)
api_router.include_router(settings.router)
