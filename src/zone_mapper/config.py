"""Application configuration management using Pydantic Settings.

This module defines the `Settings` class, which loads configuration parameters
from environment variables and a `.env` file. The local time zone is read here
once and handed to `build_mapper`; nothing re-reads it per conversion.

The `get_settings` function provides a cached, singleton instance of the
configuration, ensuring consistent settings throughout the application.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Any

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict as _SettingsConfigDict

from .errors import ConfigurationError

DEFAULT_TIMEZONE = "America/Chicago"


class Settings(BaseSettings):
    """Defines all application configuration parameters.

    Values come from environment variables or a `.env` file. List-valued
    settings accept a comma-separated string so they can be set from a shell.
    """

    model_config = _SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Time zone of the data layer. Resolved once when the mapper is built.
    LOCAL_TIMEZONE: str = Field(
        default=DEFAULT_TIMEZONE,
        description=(
            "IANA zone name (or Windows-style alias such as 'Central Standard Time') "
            "whose wall-clock values the data layer stores"
        ),
    )

    # Use Any type to prevent Pydantic Settings JSON decoding; validator converts to list[str]
    PASSTHROUGH_FIELDS: Any = Field(
        default_factory=lambda: ["appointment_time"],
        description=(
            "Comma-separated timestamp field names copied without zone conversion. "
            "Matching is case-insensitive and also checks field aliases."
        ),
    )

    LOG_LEVEL: str = Field(default="INFO", description="Logging level")

    # Provider id handed to the zone label lookup when formatting full names.
    ZONE_LABEL_PROVIDER_ID: int = Field(
        default=0,
        description="Provider id used to look up the zone display label (0 = Central)",
    )
    FULL_NAME_WITH_ZONE_LABEL: bool = Field(
        default=False,
        description="If true, append ' : <zone label>' to formatted full names",
    )

    @field_validator("PASSTHROUGH_FIELDS", mode="before")
    @classmethod
    def parse_comma_separated(cls, v: str | list[str] | None) -> list[str]:
        """Parse comma-separated string into list of stripped strings.

        Supports both direct list input (from code/tests) and comma-separated
        string input (from environment variables). An empty string yields an
        empty list, which disables passthrough entirely.
        """
        if isinstance(v, (list, tuple, set, frozenset)):
            return [s.strip() for s in v if isinstance(s, str) and s.strip()]
        if isinstance(v, str):
            if not v.strip():
                return []
            return [s.strip() for s in v.split(",") if s.strip()]
        return []

    @field_validator("LOCAL_TIMEZONE", mode="before")
    @classmethod
    def normalize_timezone(cls, v: Any) -> Any:
        """Trim whitespace; a blank zone is rejected rather than defaulted.

        Unset means `DEFAULT_TIMEZONE`. Set-but-blank is treated like any other
        unknown zone id, matching `resolve_zone`.
        """
        if isinstance(v, str):
            if not v.strip():
                raise ValueError("LOCAL_TIMEZONE must not be blank; unset it to use the default")
            return v.strip()
        return v

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def normalize_log_level(cls, v: Any) -> str:
        if isinstance(v, str) and v.strip():
            return v.strip().upper()
        return "INFO"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached, singleton instance of the application settings.

    Raises:
        ConfigurationError: when environment values fail validation.
    """
    try:
        return Settings()
    except ValidationError as e:
        problems = [
            f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}"
            for err in e.errors()
        ]
        raise ConfigurationError("Invalid zone-aware-mapper settings", problems) from e


__all__ = ["DEFAULT_TIMEZONE", "Settings", "get_settings"]
