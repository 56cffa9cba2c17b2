"""
Future Agent data service: FastAPI + Strawberry GraphQL.

Supports:
- Dev mode: SQLite, debug logging
- Prod mode: PostgreSQL (Supabase) via DATABASE_URL

Both modes auto-create tables and seed sample data on first startup.
Subsequent restarts skip seeding (data already exists).

Usage:
    # Development (default)
    uvicorn futureagent.main:app --reload

    # Production (via module)
    python -m futureagent.main --mode prod --host 0.0.0.0 --port 8000
"""
import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import TypedDict

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from futureagent.core.database import engine, get_repository
from futureagent.core.errors import NotFoundError
from futureagent.core.init_settings import settings, args
from futureagent.core.logging_config import configure_logging
from futureagent.data.repository import ToolRepository
from futureagent.data.retry import QueryError
from futureagent.db.seed import seed_if_empty
from futureagent.graphql.schema import graphql_router
from futureagent.models import Base
from futureagent.rest.redirects import redirect_router
from futureagent.rest.router import router as rest_router
from futureagent.rest.schemas import DatabaseCheck, HealthChecks, HealthResponse

logger = logging.getLogger(__name__)


class State(TypedDict):
    """Lifespan state."""
    pass


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[State]:
    """Startup and shutdown logic."""
    configure_logging(settings)

    # Startup: Create tables if they don't exist (both dev and prod)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    # Seed sample data only if database is empty (first-time setup)
    if await seed_if_empty():
        logger.info("[%s] Database seeded with sample data", settings.ENV_MODE)

    db_url = settings.async_db_url
    logger.info("[%s] Server starting...", settings.ENV_MODE)
    logger.info("[%s] Database: %s", settings.ENV_MODE, db_url.split("@")[-1] if "@" in db_url else db_url)

    yield {}

    # Shutdown
    await engine.dispose()
    logger.info("[%s] Server stopped", settings.ENV_MODE)


app = FastAPI(
    title=settings.APP_NAME,
    description="AI tool directory: tools, categories, comparisons and affiliate redirects",
    version=settings.APP_VERSION,
    lifespan=lifespan,
    debug=settings.DEBUG,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.is_dev else ["https://futureagent.ai"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Mount routers
app.include_router(graphql_router, prefix="/graphql")
app.include_router(rest_router)
app.include_router(redirect_router)


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(QueryError)
async def query_error_handler(request: Request, exc: QueryError):
    logger.error("Unhandled database error on %s: %s", request.url.path, exc.message)
    return JSONResponse(status_code=503, content={"detail": "Service temporarily unavailable"})


@app.get("/health")
async def health(repo: ToolRepository = Depends(get_repository)):
    """Health check endpoint. Never cached."""
    start = time.perf_counter()
    try:
        result = await repo.count_rows("categories")
        error = result.error.message if result.error is not None else None
    except Exception as exc:
        error = str(exc) or type(exc).__name__
    elapsed_ms = int((time.perf_counter() - start) * 1000)

    if error is not None:
        logger.error("Health check failed: %s", error, extra={"operation": "health", "error": error})

    database = DatabaseCheck(
        status="ok" if error is None else "error",
        response_time_ms=elapsed_ms,
        error=error,
    )
    body = HealthResponse(
        status="healthy" if database.status == "ok" else "unhealthy",
        timestamp=datetime.now(timezone.utc).isoformat(),
        checks=HealthChecks(database=database),
        version=settings.APP_VERSION,
    )
    return JSONResponse(
        content=body.model_dump(by_alias=True, exclude_none=True),
        status_code=200 if body.status == "healthy" else 503,
        headers={"Cache-Control": "no-store, no-cache, must-revalidate"},
    )


# Allow running as module: python -m futureagent.main --mode prod
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "futureagent.main:app",
        host=args.host,
        port=args.port,
        reload=settings.is_dev,
    )
