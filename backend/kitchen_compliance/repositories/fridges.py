"""Typed data access for fridges and their temperature logs.

Each repository wraps a single SQLAlchemy session. Any SQLAlchemy failure is
rolled back, logged, and surfaced as ``ServiceError``; nothing is retried.
"""

import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Iterator, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from kitchen_compliance.core.exceptions import ServiceError
from kitchen_compliance.db.base import as_utc, utcnow
from kitchen_compliance.models.fridge import Fridge, FridgeTempLog

logger = logging.getLogger(__name__)


@contextmanager
def storage_errors(db: Session, action: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to {action}: {e}")
        raise ServiceError(f"Failed to {action}") from e


class FridgeRepository:
    """Queries against the ``fridges`` table."""

    def __init__(self, db: Session):
        self.db = db

    def _active(self, site_id: str):
        return self.db.query(Fridge).filter(
            Fridge.site_id == site_id,
            Fridge.active == True,  # noqa: E712
        )

    def list_active(self, site_id: str) -> List[Fridge]:
        with storage_errors(self.db, "list fridges"):
            return (
                self._active(site_id)
                .order_by(Fridge.sort_order.asc(), Fridge.created_at.asc())
                .all()
            )

    def active_sort_orders(self, site_id: str) -> List[int]:
        with storage_errors(self.db, "read fridge sort orders"):
            rows = self._active(site_id).with_entities(Fridge.sort_order).all()
            return [row[0] for row in rows]

    def get(self, fridge_id: str) -> Optional[Fridge]:
        with storage_errors(self.db, "load fridge"):
            return self.db.query(Fridge).filter(Fridge.id == fridge_id).first()

    def insert(self, fridge: Fridge) -> Fridge:
        with storage_errors(self.db, "create fridge"):
            self.db.add(fridge)
            self.db.commit()
            self.db.refresh(fridge)
            return fridge

    def update(self, fridge_id: str, **patch) -> Optional[Fridge]:
        """Apply ``patch`` to one fridge; returns None when the id is unknown."""
        with storage_errors(self.db, "update fridge"):
            fridge = self.db.query(Fridge).filter(Fridge.id == fridge_id).first()
            if fridge is None:
                return None
            for key, value in patch.items():
                setattr(fridge, key, value)
            fridge.updated_at = utcnow()
            self.db.commit()
            self.db.refresh(fridge)
            return fridge


class FridgeTempLogRepository:
    """Inserts and range queries against ``fridge_temp_logs``. No updates."""

    def __init__(self, db: Session):
        self.db = db

    def insert(self, log: FridgeTempLog) -> FridgeTempLog:
        with storage_errors(self.db, "record temperature"):
            self.db.add(log)
            self.db.commit()
            self.db.refresh(log)
            return log

    def select(
        self,
        site_id: str,
        fridge_id: Optional[str] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> List[FridgeTempLog]:
        with storage_errors(self.db, "query temperature logs"):
            query = self.db.query(FridgeTempLog).filter(FridgeTempLog.site_id == site_id)
            if fridge_id:
                query = query.filter(FridgeTempLog.fridge_id == fridge_id)
            if start is not None:
                query = query.filter(FridgeTempLog.created_at >= as_utc(start))
            if end is not None:
                query = query.filter(FridgeTempLog.created_at <= as_utc(end))
            query = query.order_by(FridgeTempLog.created_at.desc())
            if limit:
                query = query.limit(limit)
            return query.all()
