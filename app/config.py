# =============================================================================
# Application Configuration — Pydantic Settings
# =============================================================================
#
# All runtime configuration lives in one `Settings` class. Values are loaded
# in this priority order (highest first):
#   1. Environment variables (e.g., `MONGODB_URI=...`, `PORT=...`)
#   2. Values from the .env file
#   3. Default values defined below
#
# The defaults point at a local MongoDB and port 3000, so the service runs
# out of the box on a developer machine.
#
# USAGE:
#   from app.config import settings
#   print(settings.mongodb_uri)
# =============================================================================

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DATABASE = "shidduchim"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Every field maps to the upper-cased env var of the same name
    (`mongodb_uri` ← `MONGODB_URI`).
    """

    # -------------------------------------------------------------------------
    # Application
    # -------------------------------------------------------------------------
    app_name: str = "Proposal Service"
    app_version: str = "0.1.0"
    debug: bool = False

    host: str = "0.0.0.0"
    port: int = Field(default=3000, gt=0, lt=65536)

    # -------------------------------------------------------------------------
    # MongoDB
    # -------------------------------------------------------------------------
    # The database name is taken from the URI path when present
    # (mongodb://host:27017/<db>); `mongodb_database` overrides it.
    # -------------------------------------------------------------------------
    mongodb_uri: str = f"mongodb://localhost:27017/{DEFAULT_DATABASE}"
    mongodb_database: str | None = None
    mongodb_collection: str = "proposals"

    # Seconds the driver waits to find a usable server before failing a call
    mongodb_server_selection_timeout_ms: int = Field(default=5000, gt=0)

    # -------------------------------------------------------------------------
    # Uploads
    # -------------------------------------------------------------------------
    # Each attachment is held fully in memory for the duration of a request
    # and stored inline in the record, so the cap applies per file.
    # -------------------------------------------------------------------------
    max_upload_bytes: int = Field(default=10 * 1024 * 1024, gt=0)

    # -------------------------------------------------------------------------
    # HTTP
    # -------------------------------------------------------------------------
    cors_origins: list[str] = ["*"]

    # -------------------------------------------------------------------------
    # Logging
    # -------------------------------------------------------------------------
    log_level: str = "INFO"
    request_logging_enabled: bool = True

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """
    Create and cache a Settings instance.

    In tests, override with FastAPI's dependency_overrides:
        app.dependency_overrides[get_settings] = lambda: Settings(max_upload_bytes=10)
    """
    return Settings()


settings = get_settings()
