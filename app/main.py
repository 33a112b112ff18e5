"""
FastAPI Application Entry Point

Campus Cafeteria Ordering System.
Supports both a mock chat assistant (development) and Gemini (production).

Endpoints:
    - /api/auth/*: Registration, login, profile
    - /api/menus/*: Menu browsing, suggestions, staff maintenance
    - /api/orders/*: Order submission, kitchen list, completion
    - /api/statistics/summary: Kitchen dashboard aggregates
    - /api/ai/chat: Menu chat assistant
    - /api/health: System health check
    - /ws: Real-time order events

Run locally: python -m app.main (or the cafeteria-api console script)

Author: Khalil Bannouri
Version: 1.0.0
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import func, select
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api import api_router, realtime_router
from app.core.config import Settings, get_settings, setup_logging
from app.core.exceptions import AppError
from app.database import build_engine, build_session_maker, init_db
from app.schemas import HealthResponse
from app.services.assistant import build_assistant
from app.services.notifications import NotificationHub

logger = logging.getLogger(__name__)


# =============================================================================
# APPLICATION LIFECYCLE
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Build the process-wide services on startup and release them on shutdown.

    Everything lives on ``app.state``; request handlers reach it through
    dependencies.
    """
    settings: Settings = app.state.settings

    # Startup
    logger.info("=" * 60)
    logger.info(f"🚀 Starting {settings.app_name}")
    logger.info(f"   Version: {settings.app_version}")
    logger.info(f"   Environment: {settings.env_mode.value}")
    logger.info(f"   Debug: {settings.debug}")
    logger.info("=" * 60)

    engine = build_engine(settings)
    await init_db(engine)
    app.state.engine = engine
    app.state.session_maker = build_session_maker(engine)
    logger.info("✅ Database initialized")

    app.state.hub = NotificationHub()
    app.state.assistant = build_assistant(settings)
    logger.info(f"✅ Assistant: {app.state.assistant.provider_name}")

    if settings.use_real_services:
        missing = settings.validate_production_config()
        if missing:
            logger.warning(f"⚠️ Missing production config: {missing}")

    logger.info("✅ Application ready!")

    yield  # Application runs

    # Shutdown
    logger.info("Shutting down...")
    app.state.hub.close()
    await app.state.assistant.aclose()
    await engine.dispose()
    logger.info("✅ Cleanup complete")


# =============================================================================
# ERROR HANDLERS
# =============================================================================

def _error(status_code: int, message: str, detail: Optional[str] = None) -> JSONResponse:
    content: dict[str, Any] = {"success": False, "error": message}
    if detail:
        content["detail"] = detail
    return JSONResponse(status_code=status_code, content=content)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return _error(exc.status_code, exc.message)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render body/query validation failures as 400 Bad Request."""
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg')}" if location else first.get("msg", "Bad Request")
    else:
        message = "Bad Request"
    return _error(400, message)


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _error(exc.status_code, str(exc.detail))


def register_exception_handlers(app: FastAPI) -> None:
    settings: Settings = app.state.settings

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Catch-all exception handler."""
        logger.exception(f"Unhandled exception: {exc}")
        return _error(
            500,
            "Internal Server Error",
            str(exc) if settings.debug else "An unexpected error occurred",
        )


# =============================================================================
# APPLICATION FACTORY
# =============================================================================

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build a configured application.

    Args:
        settings: Explicit settings (tests); defaults to the cached environment settings
    """
    settings = settings or get_settings()
    setup_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        description=(
            "Campus cafeteria ordering backend with role-based pricing "
            "and real-time kitchen notifications."
        ),
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list or ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    app.include_router(api_router)
    app.include_router(realtime_router)

    # =========================================================================
    # ROOT & HEALTH ENDPOINTS
    # =========================================================================

    @app.get("/", tags=["Root"])
    async def root() -> dict[str, str]:
        """API root with navigation links."""
        return {
            "message": f"🍽️ Welcome to {settings.app_name}",
            "version": settings.app_version,
            "environment": settings.env_mode.value,
            "documentation": "/docs",
            "health": "/api/health",
            "realtime": "/ws",
        }

    @app.get(
        "/api/health",
        response_model=HealthResponse,
        tags=["Health"],
        summary="System Health Check",
    )
    async def health_check(request: Request) -> HealthResponse:
        """Verify database connectivity and report real-time/assistant state."""
        db_status = "healthy"
        try:
            async with request.app.state.session_maker() as session:
                await session.execute(select(func.now()))
        except Exception as e:
            db_status = f"unhealthy: {str(e)}"
            logger.error(f"Database health check failed: {e}")

        assistant = request.app.state.assistant
        assistant_ok = await assistant.health_check()

        return HealthResponse(
            status="operational" if db_status == "healthy" and assistant_ok else "degraded",
            database=db_status,
            realtime_subscribers=request.app.state.hub.subscriber_count,
            assistant=f"{assistant.provider_name}: {'healthy' if assistant_ok else 'unhealthy'}",
            timestamp=datetime.now(),
        )

    return app


app = create_app()


def run() -> None:
    """Serve the app with uvicorn on the configured host and port."""
    settings = get_settings()
    uvicorn.run(
        "app.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.is_development,
    )


if __name__ == "__main__":
    run()
