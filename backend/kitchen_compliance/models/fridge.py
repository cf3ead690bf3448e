"""Fridge and fridge temperature log models."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, Float, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from kitchen_compliance.db.base import Base, TimestampMixin, new_uuid, utcnow


class Fridge(Base, TimestampMixin):
    """A fridge at a site. Never hard-deleted; ``active=False`` hides it."""

    __tablename__ = "fridges"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    site_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, default="Fridge 1")
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    min_temp: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    max_temp: Mapped[float] = mapped_column(Float, nullable=False, default=5.0)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    temp_logs: Mapped[list["FridgeTempLog"]] = relationship(
        "FridgeTempLog", back_populates="fridge"
    )

    def in_band(self, temperature: float) -> bool:
        return self.min_temp <= temperature <= self.max_temp


class FridgeTempLog(Base):
    """Append-only temperature reading for a fridge."""

    __tablename__ = "fridge_temp_logs"
    __table_args__ = (
        Index("idx_fridge_temp_logs_site_created", "site_id", "created_at"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_uuid)
    site_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    fridge_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("fridges.id"), nullable=False, index=True
    )
    temperature: Mapped[float] = mapped_column(Float, nullable=False)
    recorded_by: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    recorded_by_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_compliant: Mapped[bool] = mapped_column(Boolean, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False, index=True
    )

    fridge: Mapped["Fridge"] = relationship("Fridge", back_populates="temp_logs")
