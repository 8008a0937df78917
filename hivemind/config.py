"""
Hivemind — Application Configuration
====================================

What:  Centralized configuration management using Pydantic Settings.
How:   Reads HIVEMIND_* environment variables (or a .env file), validates
       types/ranges, and exposes a module-level `settings` object.
Who:   Imported by the app factory, the store factory and the entry point.
When:  Loaded once at import time; invalid values fail before the server binds.
"""

from pydantic_settings import BaseSettings
from pydantic import Field, field_validator

STORE_BACKENDS = {"sqlite", "memory"}


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Every setting has a default that reproduces the classic deployment:
    an on-disk store in ./hivemind.db served on port 5000.
    """

    # ── Storage ───────────────────────────────────────────────────────────
    # Which HivemindStore implementation the entry point wires in
    store: str = Field(default="sqlite", description="Store backend: sqlite or memory")

    # SQLite file holding one table per bucket (sensor, switch)
    db_path: str = Field(default="hivemind.db")

    # Seconds to wait on a locked database file before giving up
    open_timeout: float = Field(default=1.0, gt=0, le=60)

    @field_validator("store")
    @classmethod
    def validate_store(cls, v: str) -> str:
        """Ensures the store backend is one we know how to build."""
        lower = v.lower()
        if lower not in STORE_BACKENDS:
            raise ValueError(f"Invalid store '{v}'. Must be one of: {STORE_BACKENDS}")
        return lower

    # ── Server ────────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=5000, ge=1, le=65535)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── API Behaviour ─────────────────────────────────────────────────────
    # False keeps the legacy PUT contract: an undecodable body stores a
    # zero-value entity under the path id. True answers 400 instead.
    strict_put: bool = Field(default=False)

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_prefix": "HIVEMIND_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


settings = Settings()
