"""
NoteCache — Application Configuration
======================================

What:  Configuration for the storage root, bind address, and logging.
Why:   Type-safe environment variable loading with validation on startup.
How:   Pydantic Settings reads from environment variables (or a .env file),
       validates types/ranges, and returns an immutable Settings value.
Who:   Built once by the CLI or by `create_app()`, then passed explicitly to
       the store and handlers. There is no module-level settings singleton.

Environment variables:
    CACHE / STORAGE_ROOT   Directory holding the <name>.txt files
    HOST                   Bind address
    PORT                   Bind port
    STATIC_DIR             Directory served at "/" when it exists
    LOG_LEVEL              DEBUG, INFO, WARNING, ERROR, CRITICAL
"""

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have sensible defaults for local use. The instance is frozen:
    configuration is set once at process start and never mutated.
    """

    # ── Storage ───────────────────────────────────────────────────────────
    # What: Flat directory where every note lives as <name>.txt
    # Why relative default: Works for local runs and for a mounted volume alike
    storage_root: str = Field(
        default="./notes",
        validation_alias=AliasChoices("storage_root", "cache"),
        description="Directory holding one <name>.txt file per note",
    )

    # ── Server ────────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000, ge=1, le=65535)

    # What: Optional directory of static assets mounted at "/"
    # Skipped silently when the directory does not exist
    static_dir: str = Field(default="./public")

    # What: Controls verbosity of application logging
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

    @field_validator("storage_root")
    @classmethod
    def validate_storage_root(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("storage_root must not be empty")
        return v

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,  # CACHE and cache both work
        "frozen": True,
        "populate_by_name": True,
        "extra": "ignore",
    }
