"""FastAPI application entry point."""

import json
import logging
import os
import sys
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy import text

from kitchen_compliance.api.routes import api_router
from kitchen_compliance.core.config import settings
from kitchen_compliance.core.exceptions import (
    ConfigurationError,
    FridgeLimitExceededError,
    FridgeNotFoundError,
    ServiceError,
)
from kitchen_compliance.core.observability import CorrelationIdMiddleware, RequestLoggingMiddleware
from kitchen_compliance.core.rate_limit import limiter
from kitchen_compliance.db import session as db_session
from kitchen_compliance.db.base import Base
import kitchen_compliance.models  # noqa: F401  registers tables on Base.metadata

VERSION = "1.0.0"

# Configure logging - use JSON format in production, human-readable in dev
root_logger = logging.getLogger()
root_logger.setLevel(getattr(logging, settings.log_level))
root_logger.handlers.clear()

if settings.debug:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
else:
    class JSONFormatter(logging.Formatter):
        def format(self, record):
            return json.dumps({
                "ts": self.formatTime(record, self.datefmt),
                "level": record.levelname,
                "logger": record.name,
                "msg": record.getMessage(),
                "module": record.module,
                "line": record.lineno,
            })

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())

root_logger.addHandler(handler)
logger = logging.getLogger(__name__)


def _ensure_sqlite_dir(database_url: str) -> None:
    prefix = "sqlite:///"
    if database_url.startswith(prefix) and ":memory:" not in database_url:
        directory = os.path.dirname(database_url[len(prefix):])
        if directory:
            os.makedirs(directory, exist_ok=True)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info("Starting Kitchen Compliance API")

    if db_session.engine is not None:
        _ensure_sqlite_dir(settings.database_url)
        Base.metadata.create_all(bind=db_session.engine)
        logger.info("Database tables ready")
    else:
        logger.warning("No database configured - running in demo mode")

    yield

    logger.info("Shutting down Kitchen Compliance API")


app = FastAPI(
    title="Kitchen Compliance API",
    description="Fridge registry and HACCP temperature logging",
    version=VERSION,
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)

# Rate limiting setup
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": exc.message},
    )


@app.exception_handler(FridgeNotFoundError)
async def fridge_not_found_handler(request: Request, exc: FridgeNotFoundError):
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"detail": exc.message},
    )


@app.exception_handler(FridgeLimitExceededError)
async def fridge_limit_handler(request: Request, exc: FridgeLimitExceededError):
    return JSONResponse(
        status_code=status.HTTP_403_FORBIDDEN,
        content={"detail": exc.message, "tier": exc.tier, "limit": exc.limit},
    )


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content={"detail": "Data service unavailable"},
    )


# Request logging runs inside the correlation id middleware (Starlette LIFO order)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(CorrelationIdMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "Accept", "X-Correlation-ID"],
    expose_headers=["X-Correlation-ID"],
    max_age=600,
)

app.include_router(api_router, prefix=settings.api_v1_prefix)


@app.get("/health")
def health_check():
    """Basic liveness check endpoint."""
    return {
        "status": "healthy",
        "version": VERSION,
        "demo_mode": db_session.engine is None,
    }


@app.get("/health/ready")
def readiness_check():
    """Readiness check with database connectivity test."""
    if db_session.SessionLocal is None:
        database = "not configured"
    else:
        db = None
        try:
            db = db_session.SessionLocal()
            db.execute(text("SELECT 1"))
            database = "healthy"
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            database = "unhealthy"
        finally:
            if db:
                db.close()

    return {
        "status": "degraded" if database == "unhealthy" else "ready",
        "version": VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "checks": {"database": database},
    }
