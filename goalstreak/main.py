from fastapi import FastAPI, Depends
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy import text

from goalstreak.db.base import get_db
from goalstreak.core.config import settings
from goalstreak.core.logger import setup_logger
from goalstreak.routers import goals as goals_router
from goalstreak.routers import streaks as streaks_router
from goalstreak.routers import reminders as reminders_router
from goalstreak.core.errors import (
    GoalStreakException,
    goalstreak_exception_handler,
    validation_exception_handler,
    storage_exception_handler,
    unhandled_exception_handler,
)

logger = setup_logger(__name__)

app = FastAPI(
    title="goalstreak API",
    description=(
        "**Streak and goal progress engine**\n\n"
        "Daily check-in streaks with reset-on-missed-day semantics, an idempotent "
        "per-day goal progress ledger with completion detection, and deadline "
        "notifications.\n\n"
        "All error responses follow the `{code, message, details}` envelope."
    ),
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
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
app.add_exception_handler(GoalStreakException, goalstreak_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(SQLAlchemyError, storage_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# --- Routers ---
app.include_router(goals_router.router)
app.include_router(streaks_router.router)
app.include_router(reminders_router.router)

logger.info("goalstreak API configured (env=%s, timezone=%s)", settings.APP_ENV, settings.TIMEZONE)


@app.get("/health", tags=["health"], summary="Health check")
def health(db: Session = Depends(get_db)):
    """
    Returns `{"status": "ok", "db": "ok"}` when both the API and the database
    are reachable. Returns HTTP 503 if the DB is down.
    """
    try:
        db.execute(text("SELECT 1"))
        db_status = "ok"
    except SQLAlchemyError as exc:
        logger.warning("Health check could not reach the database: %s", exc)
        db_status = "unreachable"

    if db_status != "ok":
        return JSONResponse(
            status_code=503,
            content={"status": "error", "db": db_status},
        )
    return {"status": "ok", "db": "ok", "env": settings.APP_ENV}
