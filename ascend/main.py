"""
Ascend Goals API - Main Application
Goal tree CRUD + completion reports over a pooled SQL database.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from ascend import __version__
from ascend.api import goals
from ascend.config import Settings, get_settings
from ascend.context import AppContext
from ascend.errors import GoalStoreError
from ascend.logging_config import configure_logging
from ascend.middleware import RateLimitMiddleware, RequestLoggingMiddleware
from ascend.services.goal_service import GoalStore
from ascend.services.seed import seed_demo_goals

logger = logging.getLogger("ascend")


async def goal_store_error_handler(request: Request, exc: GoalStoreError) -> JSONResponse:
    """Single place where store errors become HTTP statuses."""
    if exc.status_code >= 500:
        logger.error(
            "request_failed",
            exc_info=exc,
            extra={"method": request.method, "path": request.url.path},
        )
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    context = AppContext.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings)
        logger.info("ascend_starting", extra={"env": settings.env, "port": settings.port})

        await context.start()

        if settings.seed_demo_data:
            async with context.database.session() as session:
                await seed_demo_goals(GoalStore(session, context.metrics))

        logger.info("ascend_online")
        yield

        logger.info("ascend_shutting_down")
        await context.stop()

    app = FastAPI(
        title="Ascend Goals API",
        description="Hierarchical goal tracking with completion reports",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.context = context

    app.add_exception_handler(GoalStoreError, goal_store_error_handler)

    # innermost first: rate limit, then request logging, CORS outermost
    if settings.rate_limit_enabled:
        app.add_middleware(
            RateLimitMiddleware,
            window_ms=settings.rate_limit_window_ms,
            max_requests=settings.rate_limit_max_requests,
        )
    app.add_middleware(RequestLoggingMiddleware, metrics=context.metrics)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health_check():
        """Detailed health check with database connectivity."""
        database_ok = await context.database.ping()
        return {
            "status": "healthy" if database_ok else "degraded",
            "version": __version__,
            "database": database_ok,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    app.include_router(goals.router, prefix="/api", tags=["goals"])

    # Built frontend, mounted last so API routes win
    if settings.frontend_dist and Path(settings.frontend_dist).is_dir():
        app.mount("/", StaticFiles(directory=settings.frontend_dist, html=True), name="frontend")

    return app


app = create_app()


def serve() -> None:
    """Run the API with uvicorn on the configured port."""
    import uvicorn

    uvicorn.run("ascend.main:app", host="0.0.0.0", port=get_settings().port)


if __name__ == "__main__":
    serve()
