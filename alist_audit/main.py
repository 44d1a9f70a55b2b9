from fastapi import FastAPI, Depends
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from sqlalchemy import text

from alist_audit.db.base import get_db
from alist_audit.core.config import settings
from alist_audit.core.logging_setup import setup_logging
from alist_audit.routers import movies as movies_router
from alist_audit.routers import settings as settings_router
from alist_audit.routers import stats as stats_router
from alist_audit.routers import sync as sync_router
from alist_audit.routers import export as export_router
from alist_audit.core.errors import (
    AuditException,
    audit_exception_handler,
    validation_exception_handler,
    unhandled_exception_handler,
)

setup_logging(settings.LOG_LEVEL)

app = FastAPI(
    title="A-List Audit API",
    description=(
        "**Movie-membership savings tracker**\n\n"
        "Syncs a Letterboxd diary, lets you flag which screenings used the "
        "membership, and reports savings, utilization and break-even for "
        "lifetime / year / month.\n\n"
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
app.add_exception_handler(AuditException, audit_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# --- Routers ---
app.include_router(movies_router.router)
app.include_router(settings_router.router)
app.include_router(stats_router.router)
app.include_router(sync_router.router)
app.include_router(export_router.router)


@app.get("/health", tags=["health"], summary="Health check")
def health(db: Session = Depends(get_db)):
    """
    Returns `{"status": "ok", "db": "ok"}` when both the API and the database
    are reachable. Returns HTTP 503 if the DB is down.
    """
    try:
        db.execute(text("SELECT 1"))
        db_status = "ok"
    except Exception:
        db_status = "unreachable"

    if db_status != "ok":
        return JSONResponse(
            status_code=503,
            content={"status": "error", "db": db_status},
        )
    return {"status": "ok", "db": "ok", "env": settings.APP_ENV}
