"""Fridge and temperature log schemas."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from kitchen_compliance.db.base import as_utc


def round_temperature(value: float) -> float:
    """Round a reading to one decimal place, halves away from zero."""
    return float(Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


class FridgeCreate(BaseModel):
    """Fridge creation schema. The compliance band comes from settings."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=100)
    tier: Optional[str] = None  # basic, pro, enterprise


class FridgeUpdate(BaseModel):
    """Fridge rename schema."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=100)


class FridgeResponse(BaseModel):
    """Fridge response schema."""

    id: str
    site_id: str
    name: str
    sort_order: int
    min_temp: float
    max_temp: float
    active: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("created_at", "updated_at")
    @classmethod
    def _utc(cls, v: datetime) -> datetime:
        return as_utc(v)


class FridgeTempLogCreate(BaseModel):
    """A temperature reading to record against a fridge."""

    site_id: str = Field(..., min_length=1)
    fridge_id: str = Field(..., min_length=1)
    temperature: float = Field(..., ge=-999.9, le=999.9)
    recorded_by: Optional[str] = None
    recorded_by_name: Optional[str] = None
    notes: Optional[str] = None


class FridgeTempLogResponse(BaseModel):
    """Temperature log response schema."""

    id: str
    site_id: str
    fridge_id: str
    temperature: float
    recorded_by: Optional[str] = None
    recorded_by_name: Optional[str] = None
    notes: Optional[str] = None
    is_compliant: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("created_at")
    @classmethod
    def _utc(cls, v: datetime) -> datetime:
        return as_utc(v)


class TempLogFilters(BaseModel):
    """Optional narrowing for temperature log queries.

    ``start`` is inclusive (>=) and ``end`` is inclusive (<=). Results are
    always newest first.
    """

    fridge_id: Optional[str] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    limit: Optional[int] = Field(default=None, gt=0)


class FridgeDailyStatus(BaseModel):
    """Whether a fridge has had its check today, with its latest reading."""

    fridge: FridgeResponse
    logged_today: bool
    latest_log: Optional[FridgeTempLogResponse] = None


class LoggedTodayResponse(BaseModel):
    fridge_id: str
    logged_today: bool
