# Services module

from kitchen_compliance.services.fridge_service import (
    FridgeService,
    FRIDGE_LIMITS,
    fridge_limit,
    start_of_today,
)

__all__ = [
    "FridgeService",
    "FRIDGE_LIMITS",
    "fridge_limit",
    "start_of_today",
]
