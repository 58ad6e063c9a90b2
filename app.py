"""
DoseMinder Backend
Main FastAPI application for medication reminders and dose schedules
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, Dict, Optional

from fastapi import Depends, FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from config import settings, local_now
from database import get_db, init_db, DatabaseHealthCheck
from api import include_routers


logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL),
    format=settings.LOG_FORMAT
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables on startup"""
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION} ({settings.ENV})")
    logger.info(f"Clock: {settings.TIMEZONE}, labels: {settings.DEFAULT_LANGUAGE}, weeks start {settings.WEEK_STARTS_ON}")

    try:
        init_db()
    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        raise

    yield

    logger.info(f"Shutting down {settings.APP_NAME}")


app = FastAPI(
    title=settings.APP_NAME,
    description="""
    ## DoseMinder API

    Medication reminders built on a dose-schedule derivation engine.

    ### Features
    - **Today's Doses**: Every scheduled dose with its live status (upcoming, due now, overdue, taken)
    - **Time Groups**: Same-time doses grouped, overdue doses first
    - **Weekly Calendar**: Per-date schedules with missed-dose detection
    - **Adherence**: Per-medicine and account-wide adherence and streaks
    """,
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

include_routers(app, prefix=settings.API_PREFIX)


# ==================== EXCEPTION HANDLERS ====================

def error_response(status_code: int, message: Any, details: Optional[list] = None) -> JSONResponse:
    """JSON error envelope shared by every handler"""
    content: Dict[str, Any] = {
        "error": True,
        "message": message,
        "status_code": status_code,
        "timestamp": datetime.utcnow().isoformat()
    }
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


@app.exception_handler(HTTPException)
async def http_exception_handler(request, exc: HTTPException):
    return error_response(exc.status_code, exc.detail)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request, exc: RequestValidationError):
    details = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
        for err in exc.errors()
    ]
    return error_response(422, "Request validation failed", details)


@app.exception_handler(Exception)
async def general_exception_handler(request, exc: Exception):
    logger.error(f"Unhandled error on {request.url.path}: {exc}", exc_info=True)
    return error_response(500, str(exc) if settings.DEBUG else "An unexpected error occurred")


# ==================== HEALTH ENDPOINTS ====================

@app.get("/", tags=["Health"])
async def root():
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "healthy"
    }


@app.get("/health", tags=["Health"])
async def health_check(db: Session = Depends(get_db)):
    """
    Database status, stored row counts and the clock the schedules use
    """
    db_connected = DatabaseHealthCheck.is_connected()

    return {
        "status": "healthy" if db_connected else "degraded",
        "database": {
            "status": "up" if db_connected else "down",
            "rows": DatabaseHealthCheck.row_counts(db) if db_connected else {}
        },
        "config": {
            "timezone": settings.TIMEZONE,
            "local_time": local_now().isoformat(timespec="minutes"),
            "default_language": settings.DEFAULT_LANGUAGE,
            "week_starts_on": settings.WEEK_STARTS_ON
        },
        "version": settings.APP_VERSION
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )
