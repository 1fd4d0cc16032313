# backend/app/main.py
from __future__ import annotations

"""
FastAPI application setup.

This module depends on:
- app.config.get_settings for configuration
- app.api.api_router for route registration
- app.services.statsig_client for flushing telemetry on shutdown
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api import api_router
from app.config import get_settings
from app.services.statsig_client import shutdown_statsig

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title=settings.app_name,
    version="0.1.0",
)


# ---- CORS ----

app.add_middleware(
    CORSMiddleware,
    allow_origins=[str(o) for o in settings.allowed_origins],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---- Routes ----

app.include_router(api_router, prefix="/api")


# ---- Lifecycle ----


@app.on_event("shutdown")
def on_shutdown() -> None:
    """Flush pending telemetry events."""
    shutdown_statsig()


# ---- Healthcheck ----


@app.get("/health", tags=["health"])
def health() -> dict:
    return {"status": "ok"}
