from __future__ import annotations

"""backend/app/config/settings.py

Application configuration using environment-driven settings.

This module centralizes:
- application name, environment tier and log level
- CORS configuration
- Statsig telemetry credentials
- deployment panel switches and the demo error message
- simulated backend actor latency
"""
from functools import lru_cache
from typing import List

from pydantic import AnyHttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
  app_name: str = "featured-photo-backend"
  environment: str = "development"
  log_level: str = "INFO"

  # CORS
  allowed_origins: List[AnyHttpUrl] = [
      "http://localhost:3000",
      "http://127.0.0.1:3000",
      "http://localhost:5173",
      "http://127.0.0.1:5173",
  ]

  # Telemetry (disabled when unset)
  statsig_server_secret: str | None = None

  # Deployment panel
  deploy_panel_enabled: bool = True
  demo_deployment_error: str = "network timeout: no response from subnet"

  # Simulated round trip to the backend actor (seconds)
  actor_latency_seconds: float = 0.0

  model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
  """Return a cached Settings instance."""
  return Settings()
