"""
Runtime configuration for the Autocomplete Auditor.

This module centralizes environment-driven configuration: which audits run,
where the lookup tables come from, resource limits, and log verbosity.

Configuration is read-only at runtime and must not influence audit
outcomes beyond selecting audits and table data.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from pydantic import BaseModel, Field, field_validator


ENV_PREFIX = "AUTOCOMPLETE_AUDITOR_"


class AuditorConfig(BaseModel):
    """
    Runtime configuration for the Autocomplete Auditor.

    Configuration is environment-driven and read-only at runtime.
    """

    # ------------------------------------------------------------------
    # Audit selection
    # ------------------------------------------------------------------

    ENABLE_LEGACY_PRESENCE_AUDIT: bool = Field(
        False,
        description=(
            "Also run the legacy presence-only audit, which flags every "
            "input without an autocomplete attribute"
        ),
    )

    # ------------------------------------------------------------------
    # Lookup tables
    # ------------------------------------------------------------------

    TABLES_PATH: Path | None = Field(
        None,
        description=(
            "Path to a replacement autocomplete tables JSON asset. "
            "The bundled asset is used when unset."
        ),
    )

    # ------------------------------------------------------------------
    # Safety and resource limits
    # ------------------------------------------------------------------

    MAX_INPUTS: int = Field(
        10_000,
        gt=0,
        description="Maximum number of inputs accepted in one audit run",
    )

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------

    LOG_LEVEL: str = Field(
        "INFO",
        description="Standard library logging level name",
    )

    # ------------------------------------------------------------------
    # Validators (Pydantic v2)
    # ------------------------------------------------------------------

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        allowed = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}
        level = v.upper()
        if level not in allowed:
            raise ValueError(
                f"Unsupported LOG_LEVEL '{v}'. "
                f"Allowed values: {sorted(allowed)}"
            )
        return level

    @field_validator("TABLES_PATH")
    @classmethod
    def tables_path_must_exist(cls, v: Path | None) -> Path | None:
        if v is None:
            return v
        if not v.exists():
            raise ValueError(f"Configured TABLES_PATH does not exist: {v}")
        if not v.is_file():
            raise ValueError(f"Configured TABLES_PATH is not a file: {v}")
        return v

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_env(cls) -> "AuditorConfig":
        """
        Load configuration from environment variables.

        All values are parsed once at startup and must remain immutable.
        """

        def env_bool(name: str, default: bool) -> bool:
            raw = os.getenv(name)
            if raw is None:
                return default
            return raw.lower() in {"1", "true", "yes", "on"}

        tables_env = os.getenv(f"{ENV_PREFIX}TABLES_PATH")

        return cls(
            ENABLE_LEGACY_PRESENCE_AUDIT=env_bool(
                f"{ENV_PREFIX}ENABLE_LEGACY_PRESENCE_AUDIT", False
            ),
            TABLES_PATH=(
                Path(tables_env)
                if tables_env
                else None
            ),
            MAX_INPUTS=int(
                os.getenv(f"{ENV_PREFIX}MAX_INPUTS", "10000")
            ),
            LOG_LEVEL=os.getenv(
                f"{ENV_PREFIX}LOG_LEVEL", "INFO"
            ),
        )

    model_config = {
        "frozen": True,
    }


def configure_logging(level: str) -> None:
    """Install a basic root handler for the service entrypoint."""
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
