"""
Heatman API Endpoints
"""

import os
import sys

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse
from loguru import logger

# Add core to Python path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from core.heatman.exceptions import HeatmanError
from core.heatman.heater_service import HeaterService
from core.heatman.settings import HeaterConfig

APP_NAME = "Heatman"
VERSION = "0.1.0"

router = APIRouter()

# Heater service (set by app.py during startup)
heater_service: HeaterService | None = None


def envelope(data: dict | None = None, error: str | None = None, status_code: int = 200) -> JSONResponse:
    """Wrap a payload in the standard response envelope."""
    return JSONResponse(
        status_code=status_code,
        content={
            "success": error is None,
            "data": data,
            "error": error,
        },
    )


def _service_unavailable() -> JSONResponse:
    return envelope(error="Heater service not initialized", status_code=503)


async def _build_state(service: HeaterService, include_config: bool, tolerate_errors: bool = False) -> dict:
    """Collect config, availability and live readings for a response."""
    config = await service.get_config()
    available = await service.is_available()

    data = {
        "temperature": None,
        "co2": None,
        "is_heating": None,
        "available": available,
        "config": config.model_dump() if include_config else None,
    }

    try:
        reading, is_heating = await service.read_status()
    except HeatmanError as e:
        if not tolerate_errors:
            raise
        logger.warning(f"Heater status unavailable: {e}")
        return data

    data.update(temperature=reading.temperature, co2=reading.co2, is_heating=is_heating)
    return data


@router.get("/api/health")
async def health_check():
    """Health check endpoint."""
    available = await heater_service.is_available() if heater_service else False
    return {
        "status": "healthy",
        "app": APP_NAME,
        "version": VERSION,
        "service_running": heater_service is not None,
        "heater_available": available,
    }


@router.get("/")
async def get_config_and_state(include_config: bool = Query(False)):
    """Get live readings, heater state and availability, optionally with the config."""
    if not heater_service:
        return _service_unavailable()

    try:
        data = await _build_state(heater_service, include_config)
    except HeatmanError as e:
        logger.error(f"Failed to read heater status: {e}")
        return envelope(error="Failed to read heater status", status_code=502)

    logger.debug(f"Sending state: {data}")
    return envelope(data)


@router.patch("/")
async def patch_config(new_config: HeaterConfig):
    """Replace the heater config, persist it and reconcile right away."""
    if not heater_service:
        return _service_unavailable()

    try:
        await heater_service.replace_config(new_config)
    except OSError as e:
        logger.error(f"Failed to save heater config: {e}")
        return envelope(error="Failed to save config", status_code=500)

    # Failures are only logged; the periodic loop retries anyway
    outcome = await heater_service.check_now()
    if not outcome.ok:
        logger.warning(f"Reconciliation after config update failed: {outcome.error}")

    data = await _build_state(heater_service, include_config=True, tolerate_errors=True)
    return envelope(data)
