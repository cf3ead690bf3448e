"""SQLAlchemy models."""

from kitchen_compliance.models.fridge import Fridge, FridgeTempLog

__all__ = ["Fridge", "FridgeTempLog"]
