"""Fridge registry routes."""

from typing import List

from fastapi import APIRouter, Request, status

from kitchen_compliance.core.exceptions import FridgeNotFoundError
from kitchen_compliance.core.rate_limit import limiter
from kitchen_compliance.db.session import DbSession
from kitchen_compliance.schemas.fridge import (
    FridgeCreate,
    FridgeDailyStatus,
    FridgeResponse,
    FridgeUpdate,
)
from kitchen_compliance.services.fridge_service import FridgeService

router = APIRouter()


@router.get("/sites/{site_id}/fridges", response_model=List[FridgeResponse])
@limiter.limit("60/minute")
def list_fridges(request: Request, site_id: str, db: DbSession):
    """List active fridges for a site in display order."""
    return FridgeService(db).list_fridges(site_id)


@router.post(
    "/sites/{site_id}/fridges",
    response_model=FridgeResponse,
    status_code=status.HTTP_201_CREATED,
)
@limiter.limit("30/minute")
def create_fridge(request: Request, site_id: str, fridge_in: FridgeCreate, db: DbSession):
    """Add a fridge to a site."""
    return FridgeService(db).create_fridge(site_id, fridge_in.name, tier=fridge_in.tier)


@router.get("/sites/{site_id}/fridges/status", response_model=List[FridgeDailyStatus])
@limiter.limit("60/minute")
def get_daily_status(request: Request, site_id: str, db: DbSession):
    """Whether each fridge has been checked today, with its latest reading."""
    return FridgeService(db).daily_status(site_id)


@router.get("/fridges/{fridge_id}", response_model=FridgeResponse)
@limiter.limit("60/minute")
def get_fridge(request: Request, fridge_id: str, db: DbSession):
    """Get a fridge by id, including deactivated ones."""
    fridge = FridgeService(db).get_fridge(fridge_id)
    if fridge is None:
        raise FridgeNotFoundError(fridge_id)
    return fridge


@router.patch("/fridges/{fridge_id}", response_model=FridgeResponse)
@limiter.limit("30/minute")
def rename_fridge(request: Request, fridge_id: str, fridge_in: FridgeUpdate, db: DbSession):
    """Rename a fridge."""
    return FridgeService(db).rename_fridge(fridge_id, fridge_in.name)


@router.delete("/fridges/{fridge_id}", status_code=status.HTTP_204_NO_CONTENT)
@limiter.limit("30/minute")
def deactivate_fridge(request: Request, fridge_id: str, db: DbSession):
    """Remove a fridge from the site. Historical temperature logs are preserved."""
    FridgeService(db).deactivate_fridge(fridge_id)
