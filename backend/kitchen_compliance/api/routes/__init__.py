"""API routes."""

from fastapi import APIRouter

from kitchen_compliance.api.routes import fridge_temp_logs, fridges, voice

api_router = APIRouter()

api_router.include_router(fridges.router, tags=["fridges"])
api_router.include_router(fridge_temp_logs.router, tags=["fridge-temp-logs"])
api_router.include_router(voice.router, prefix="/voice", tags=["voice"])
