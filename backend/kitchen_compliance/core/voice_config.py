"""
Timing and limits for the ChefVoice conversational flow.

Pure data consumed by the voice client. Every table is a read-only mapping;
durations are milliseconds unless noted.
"""

from types import MappingProxyType
from typing import Any, Dict, Mapping

from kitchen_compliance.core.config import settings

VOICE_TIMING: Mapping[str, int] = MappingProxyType({
    # Wake word detection
    "WAKE_WORD_INTERIM_BEEP_DELAY": 0,
    "WAKE_WORD_TO_COMMAND_GAP": 500,
    "IMMEDIATE_COMMAND_WINDOW": 300,  # command spoken together with the wake word

    # Command listening
    "COMMAND_SILENCE_THRESHOLD": 1500,
    "COMMAND_MAX_DURATION": 10000,
    "COMMAND_MIN_AUDIO_SIZE": 1000,  # bytes

    # Flow conversation
    "TTS_TO_LISTEN_DELAY": 500,  # avoids picking up our own speech
    "FLOW_STEP_TIMEOUT": 10000,
    "FLOW_STEP_TIMEOUT_STAFF": 12000,
    "FLOW_STEP_TIMEOUT_CONFIRM": 10000,

    # Retries and feedback
    "RETRY_DELAY": 500,
    "SILENCE_BEFORE_REPROMPT": 3000,

    # Audio analysis
    "SILENCE_DETECTION_THRESHOLD": 5,  # volume, 0-100
    "SILENCE_DURATION_FOR_STOP": 2000,
})

VOICE_LIMITS: Mapping[str, int] = MappingProxyType({
    "MAX_RETRIES_PER_STEP": 3,
    "MAX_TOTAL_RETRIES_PER_FLOW": 5,
    "MAX_FLOW_DURATION": 60000,
    "STICKY_STAFF_TIMEOUT_MS": 300000,  # remember staff identity for 5 minutes
})

VOICE_DEBUG: Mapping[str, bool] = MappingProxyType({
    "enabled": settings.debug,
    "log_transitions": True,
    "log_transcripts": True,
    "log_timings": True,
    "simulate_recognition": False,
})

AUDIO_ASSETS: Mapping[str, str] = MappingProxyType({
    "WAKE_WORD_BEEP": "/sounds/wake_detected.mp3",
    "SUCCESS_BEEP": "/sounds/success.mp3",
    "ERROR_BEEP": "/sounds/error.mp3",
})


def voice_config_payload() -> Dict[str, Dict[str, Any]]:
    """Plain-dict copy of every table, for JSON responses."""
    return {
        "timing": dict(VOICE_TIMING),
        "limits": dict(VOICE_LIMITS),
        "debug": dict(VOICE_DEBUG),
        "audio_assets": dict(AUDIO_ASSETS),
    }
