"""Fridge temperature log routes."""

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Query, Request, status

from kitchen_compliance.core.rate_limit import limiter
from kitchen_compliance.db.session import DbSession
from kitchen_compliance.schemas.fridge import (
    FridgeTempLogCreate,
    FridgeTempLogResponse,
    LoggedTodayResponse,
    TempLogFilters,
)
from kitchen_compliance.services.fridge_service import FridgeService

router = APIRouter()


@router.post(
    "/fridge-temp-logs",
    response_model=FridgeTempLogResponse,
    status_code=status.HTTP_201_CREATED,
)
@limiter.limit("30/minute")
def record_temperature(request: Request, log: FridgeTempLogCreate, db: DbSession):
    """Record a fridge temperature reading."""
    return FridgeService(db).record_temperature(log)


@router.get("/sites/{site_id}/fridge-temp-logs", response_model=List[FridgeTempLogResponse])
@limiter.limit("60/minute")
def query_logs(
    request: Request,
    site_id: str,
    db: DbSession,
    fridge_id: Optional[str] = None,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    limit: Optional[int] = Query(None, ge=1, le=1000),
):
    """Temperature logs for a site, newest first."""
    filters = TempLogFilters(fridge_id=fridge_id, start=start, end=end, limit=limit)
    return FridgeService(db).query_logs(site_id, filters)


@router.get(
    "/sites/{site_id}/fridges/{fridge_id}/logs/today",
    response_model=List[FridgeTempLogResponse],
)
@limiter.limit("60/minute")
def query_todays_logs(request: Request, site_id: str, fridge_id: str, db: DbSession):
    """Readings taken since local midnight."""
    return FridgeService(db).query_todays_logs(site_id, fridge_id)


@router.get(
    "/sites/{site_id}/fridges/{fridge_id}/logged-today",
    response_model=LoggedTodayResponse,
)
@limiter.limit("60/minute")
def has_logged_today(request: Request, site_id: str, fridge_id: str, db: DbSession):
    return LoggedTodayResponse(
        fridge_id=fridge_id,
        logged_today=FridgeService(db).has_logged_today(site_id, fridge_id),
    )


@router.get(
    "/sites/{site_id}/fridges/{fridge_id}/logs/latest",
    response_model=Optional[FridgeTempLogResponse],
)
@limiter.limit("60/minute")
def latest_log(request: Request, site_id: str, fridge_id: str, db: DbSession):
    """Most recent reading for a fridge, or null when it has none."""
    return FridgeService(db).latest_log(site_id, fridge_id)
