"""Voice assistant configuration routes."""

from fastapi import APIRouter, Request

from kitchen_compliance.core.rate_limit import limiter
from kitchen_compliance.core.voice_config import voice_config_payload

router = APIRouter()


@router.get("/config")
@limiter.limit("60/minute")
def get_voice_config(request: Request):
    """Timing, retry limits, debug switches and audio assets for the voice client."""
    return voice_config_payload()
