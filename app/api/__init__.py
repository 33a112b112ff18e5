"""
HTTP and WebSocket routers.
"""

from fastapi import APIRouter

from app.api import ai, auth, menus, orders, realtime, statistics

api_router = APIRouter(prefix="/api")
api_router.include_router(auth.router)
api_router.include_router(menus.router)
api_router.include_router(orders.router)
api_router.include_router(statistics.router)
api_router.include_router(ai.router)

realtime_router = realtime.router

__all__ = ["api_router", "realtime_router"]
