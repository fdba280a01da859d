import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from minakami.core.config import settings
from minakami.core.errors import (
    MinakamiException,
    minakami_exception_handler,
    unhandled_exception_handler,
    validation_exception_handler,
)
from minakami.db.base import get_database
from minakami.db.facade import DatabaseService
from minakami.routers import activities as activities_router
from minakami.routers import ingest as ingest_router
from minakami.routers import journal as journal_router
from minakami.routers import state as state_router

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    database = DatabaseService.from_settings(settings)
    await database.initialize()
    app.state.database = database
    try:
        yield
    finally:
        await database.close()
        logger.info("Database connection closed")


app = FastAPI(
    title="Minakami API",
    description=(
        "**Personal activity tracking store**\n\n"
        "Stores activities, visited places, call logs, app usage, daily "
        "summaries, narratives and notes for the journaling app.\n\n"
        "All error responses follow the `{code, message, details}` envelope."
    ),
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# --- CORS ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Exception handlers (most specific first) ---
app.add_exception_handler(MinakamiException, minakami_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# --- Routers ---
app.include_router(activities_router.router)
app.include_router(journal_router.router)
app.include_router(ingest_router.router)
app.include_router(state_router.router)


@app.get("/health", tags=["health"], summary="Health check")
async def health(db: DatabaseService = Depends(get_database)):
    """
    Returns `{"status": "ok", "db": "ok"}` when both the API and the database
    are reachable. Returns HTTP 503 if the DB is down.
    """
    try:
        await db.query_one("SELECT 1")
        db_status = "ok"
    except MinakamiException:
        db_status = "unreachable"

    if db_status != "ok":
        return JSONResponse(
            status_code=503,
            content={"status": "error", "db": db_status},
        )
    return {"status": "ok", "db": "ok", "env": settings.APP_ENV}
