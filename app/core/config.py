"""Application configuration via pydantic-settings.

Environment-specific values are read from the process environment or `.env`.
The order processing delay is deliberately not configurable here.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Strongly-typed application settings loaded from `.env`."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_name: str = Field(default="order-lifecycle-tracker", alias="APP_NAME")
    api_cors_origins: str = Field(default="http://localhost", alias="API_CORS_ORIGINS")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_json: bool = Field(default=False, alias="LOG_JSON")

    worker_threads: int | None = Field(default=None, ge=1, alias="WORKER_THREADS")

    host: str = Field(default="127.0.0.1", alias="HOST")
    port: int = Field(default=8000, alias="PORT")

    @property
    def cors_origins(self) -> list[str]:
        """Return the comma-separated CORS origins as a list."""
        return [o.strip() for o in self.api_cors_origins.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()
