"""
Fridge Temperature Logging Service
==================================
Fridge registry (create, rename, deactivate, list) and the append-only
temperature log used for FSAI/HACCP daily fridge checks.

The service is handed an optional database session. Without one it runs in
demo mode: reads return synthetic or empty data so the kiosk keeps working,
registry writes raise ConfigurationError, and temperature readings are
echoed back as unsaved logs.
"""

import logging
import time
from datetime import datetime, timezone, tzinfo
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from kitchen_compliance.core.config import Settings, get_settings
from kitchen_compliance.core.exceptions import (
    ConfigurationError,
    FridgeLimitExceededError,
    FridgeNotFoundError,
)
from kitchen_compliance.db.base import utcnow
from kitchen_compliance.models.fridge import Fridge, FridgeTempLog
from kitchen_compliance.repositories.fridges import FridgeRepository, FridgeTempLogRepository
from kitchen_compliance.schemas.fridge import (
    FridgeTempLogCreate,
    TempLogFilters,
    round_temperature,
)

logger = logging.getLogger(__name__)


# Fridges allowed per site by subscription tier; None means unlimited
FRIDGE_LIMITS: Dict[str, Optional[int]] = {
    "basic": 1,
    "pro": 2,
    "enterprise": None,
}

DEMO_FRIDGE_ID = "demo-fridge-1"
DEMO_FRIDGE_NAME = "Main Fridge"

# Demo readings are judged against this band, not a stored fridge
DEMO_MIN_TEMP = 0.0
DEMO_MAX_TEMP = 5.0


def fridge_limit(tier: Optional[str]) -> Optional[int]:
    """Fridge allowance for a tier. Unknown or missing tiers get the basic limit."""
    return FRIDGE_LIMITS.get((tier or "basic").lower(), FRIDGE_LIMITS["basic"])


def start_of_today(tz: tzinfo, now: Optional[datetime] = None) -> datetime:
    """Local midnight of the current day in ``tz``, returned in UTC."""
    local_now = (now or datetime.now(timezone.utc)).astimezone(tz)
    midnight = local_now.replace(hour=0, minute=0, second=0, microsecond=0)
    return midnight.astimezone(timezone.utc)


class FridgeService:
    """Fridge registry and temperature log recorder for one request."""

    def __init__(self, db_session: Session = None, settings: Settings = None):
        self.db = db_session
        self.settings = settings or get_settings()
        self.fridges = FridgeRepository(db_session) if db_session is not None else None
        self.logs = FridgeTempLogRepository(db_session) if db_session is not None else None

    @property
    def is_configured(self) -> bool:
        return self.db is not None

    def _require_backend(self, action: str) -> None:
        if not self.is_configured:
            logger.warning(f"Cannot {action} in demo mode - no database configured")
            raise ConfigurationError()

    # ==================== FRIDGE REGISTRY ====================

    def _demo_fridge(self, site_id: str) -> Fridge:
        now = utcnow()
        return Fridge(
            id=DEMO_FRIDGE_ID,
            site_id=site_id,
            name=DEMO_FRIDGE_NAME,
            sort_order=0,
            min_temp=DEMO_MIN_TEMP,
            max_temp=DEMO_MAX_TEMP,
            active=True,
            created_at=now,
            updated_at=now,
        )

    def list_fridges(self, site_id: str) -> List[Fridge]:
        """Active fridges for a site, in display order."""
        if not self.is_configured:
            return [self._demo_fridge(site_id)]
        return self.fridges.list_active(site_id)

    def get_fridge(self, fridge_id: str) -> Optional[Fridge]:
        """A fridge by id, active or not. None when unknown."""
        if not self.is_configured:
            if fridge_id == DEMO_FRIDGE_ID:
                return self._demo_fridge(self.settings.demo_site_id)
            return None
        return self.fridges.get(fridge_id)

    def create_fridge(self, site_id: str, name: str, tier: Optional[str] = None) -> Fridge:
        """Add a fridge at the end of the site's display order.

        The rank is the number of active fridges at creation time. If a
        deactivation left that rank taken, the fridge goes after the current
        highest rank instead.
        """
        self._require_backend("create fridge")
        name = name.strip()
        if not name:
            raise ValueError("Fridge name must not be empty")

        taken = self.fridges.active_sort_orders(site_id)
        active_count = len(taken)
        if tier is not None:
            limit = fridge_limit(tier)
            if limit is not None and active_count >= limit:
                logger.info(f"Site {site_id} reached fridge limit {limit} for tier {tier}")
                raise FridgeLimitExceededError(tier, limit)

        sort_order = active_count
        if sort_order in taken:
            sort_order = max(taken) + 1

        fridge = self.fridges.insert(Fridge(
            site_id=site_id,
            name=name,
            sort_order=sort_order,
            min_temp=self.settings.default_min_temp,
            max_temp=self.settings.default_max_temp,
            active=True,
        ))
        logger.info(f"Created fridge {fridge.id}: {name} at site {site_id} (rank {sort_order})")
        return fridge

    def rename_fridge(self, fridge_id: str, name: str) -> Fridge:
        self._require_backend("rename fridge")
        name = name.strip()
        if not name:
            raise ValueError("Fridge name must not be empty")

        fridge = self.fridges.update(fridge_id, name=name)
        if fridge is None:
            raise FridgeNotFoundError(fridge_id)
        return fridge

    def deactivate_fridge(self, fridge_id: str) -> None:
        """Soft delete. Historical temperature logs are kept."""
        self._require_backend("deactivate fridge")
        if self.fridges.update(fridge_id, active=False) is None:
            raise FridgeNotFoundError(fridge_id)
        logger.info(f"Deactivated fridge {fridge_id}")

    # ==================== TEMPERATURE LOGS ====================

    def record_temperature(self, log: FridgeTempLogCreate) -> FridgeTempLog:
        """Record a reading. Out-of-band readings are stored, flagged non-compliant."""
        if not self.is_configured:
            return FridgeTempLog(
                id=f"demo-log-{int(time.time() * 1000)}",
                site_id=log.site_id,
                fridge_id=log.fridge_id,
                temperature=log.temperature,
                recorded_by=log.recorded_by or None,
                recorded_by_name=log.recorded_by_name or None,
                notes=log.notes or None,
                is_compliant=DEMO_MIN_TEMP <= log.temperature <= DEMO_MAX_TEMP,
                created_at=utcnow(),
            )

        fridge = self.fridges.get(log.fridge_id)
        if fridge is None or not fridge.active or fridge.site_id != log.site_id:
            raise FridgeNotFoundError(log.fridge_id, log.site_id)

        # Stored to one decimal, so the band check uses the stored value
        temperature = round_temperature(log.temperature)
        is_compliant = fridge.in_band(temperature)
        if not is_compliant:
            logger.warning(
                f"Fridge {fridge.id} ({fridge.name}) out of range: {temperature}C "
                f"outside {fridge.min_temp}-{fridge.max_temp}C"
            )

        return self.logs.insert(FridgeTempLog(
            site_id=log.site_id,
            fridge_id=log.fridge_id,
            temperature=temperature,
            recorded_by=log.recorded_by or None,
            recorded_by_name=log.recorded_by_name or None,
            notes=log.notes or None,
            is_compliant=is_compliant,
            created_at=utcnow(),
        ))

    def query_logs(self, site_id: str, filters: TempLogFilters = None) -> List[FridgeTempLog]:
        """Logs for a site, newest first."""
        if not self.is_configured:
            return []
        filters = filters or TempLogFilters()
        return self.logs.select(
            site_id,
            fridge_id=filters.fridge_id,
            start=filters.start,
            end=filters.end,
            limit=filters.limit,
        )

    def query_todays_logs(self, site_id: str, fridge_id: str) -> List[FridgeTempLog]:
        start = start_of_today(self.settings.tzinfo)
        return self.query_logs(site_id, TempLogFilters(fridge_id=fridge_id, start=start))

    def has_logged_today(self, site_id: str, fridge_id: str) -> bool:
        return len(self.query_todays_logs(site_id, fridge_id)) > 0

    def latest_log(self, site_id: str, fridge_id: str) -> Optional[FridgeTempLog]:
        logs = self.query_logs(site_id, TempLogFilters(fridge_id=fridge_id, limit=1))
        return logs[0] if logs else None

    def daily_status(self, site_id: str) -> List[Dict]:
        """Today's check status for every active fridge at a site."""
        return [
            {
                "fridge": fridge,
                "logged_today": self.has_logged_today(site_id, fridge.id),
                "latest_log": self.latest_log(site_id, fridge.id),
            }
            for fridge in self.list_fridges(site_id)
        ]
