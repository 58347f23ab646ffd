"""
Heatman Backend Application

FastAPI application serving the heater config API and running the heater
service in the background.
"""

import os
import sys
from contextlib import asynccontextmanager

import log_config  # noqa: F401
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

# Add core to Python path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import api
from api import APP_NAME, VERSION, envelope
from api import router as api_router

from core.heatman.config_store import load_config
from core.heatman.heater_service import HeaterService
from core.heatman.metrics_client import MetricsClient
from core.heatman.models import ControllerState
from core.heatman.plug_client import PlugClient
from core.heatman.presence import PresenceProbe
from core.heatman.settings import ControllerSettings, load_settings


def build_heater_service(settings: ControllerSettings) -> HeaterService:
    """Wire clients and shared state from settings."""
    state = ControllerState(config=load_config(settings.config_path), available=True)

    return HeaterService(
        state,
        metrics=MetricsClient(settings.metrics_url, timeout=settings.http_timeout),
        presence=PresenceProbe(
            settings.pc_address,
            settings.lock_url,
            ping_timeout=settings.ping_timeout,
            http_timeout=settings.http_timeout,
        ),
        plug=PlugClient(settings.plug_url, switch_id=settings.plug_switch_id, timeout=settings.http_timeout),
        check_interval_seconds=settings.check_interval_seconds,
        probe_when_forced=settings.probe_when_forced,
        config_path=settings.config_path,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan manager for startup/shutdown."""
    # Startup
    logger.info(f"{APP_NAME} starting")

    settings = load_settings()
    logger.info(f"Metrics: {settings.metrics_url}, PC: {settings.pc_address}, plug: {settings.plug_url}")

    heater_service = build_heater_service(settings)
    await heater_service.start()

    # Make heater service available to API
    api.heater_service = heater_service

    yield

    # Shutdown
    logger.info(f"{APP_NAME} shutting down")
    await heater_service.stop()
    api.heater_service = None


# Create FastAPI application
app = FastAPI(
    title="Heatman API",
    description="Switches a space heater based on temperature, CO2 and PC presence",
    version=VERSION,
    lifespan=lifespan,
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Reject invalid bodies and queries with the standard envelope."""
    logger.warning(f"Invalid request to {request.url.path}: {exc.errors()}")
    return envelope(error="Invalid request", status_code=422)


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle all unhandled exceptions without leaking details to the client."""
    logger.opt(exception=exc).error(f"Unhandled exception on {request.url.path}: {exc}")
    return envelope(error="Internal server error", status_code=500)


# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API router
app.include_router(api_router)


# For development
if __name__ == "__main__":
    import uvicorn

    settings = load_settings()
    uvicorn.run(app, host=settings.host, port=settings.port)
