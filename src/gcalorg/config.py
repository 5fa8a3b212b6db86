"""Configuration management for gcalorg.

Process-wide settings come from environment variables (and a ``.env``
file, via dotenv). Calendar profiles live in a YAML file with one
top-level stanza per profile.
"""

import logging
import os
from datetime import datetime, tzinfo
from typing import Any, Dict, List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

from gcalorg.exceptions import ConfigurationError
from gcalorg.types import CalendarSpec

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "~/.gcalorg.yaml"


def _expand_home(path: str) -> str:
    if path.startswith("~/"):
        return os.path.join(os.path.expanduser("~"), path[2:])
    return path


def _validate_timezone(v: Optional[str]) -> Optional[str]:
    if not v:
        return None
    try:
        ZoneInfo(v)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValueError(f"Unknown timezone: {v}")
    return v


class AppConfig(BaseModel):
    """Application configuration loaded from environment variables."""

    config_file: str = Field(description="Path to the YAML profile file")
    google_credentials_file: str = Field(
        description="Path to the Google OAuth client secrets file"
    )
    timezone: Optional[str] = Field(
        None, description="IANA timezone for rendered times (default: system)"
    )
    log_level: str = Field(description="Logging level")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        level = v.upper()
        if level not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return level

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: Optional[str]) -> Optional[str]:
        return _validate_timezone(v)


class CalendarProfile(BaseModel):
    """One named stanza of the profile file."""

    name: str
    tokenfile: str = Field(description="OAuth token file for this profile")
    orgfile: str = Field("", description="Output file; empty or '-' for stdout")
    tagname: str = Field("", description="Optional file-wide org tag")
    timezone: Optional[str] = Field(None, description="Overrides AppConfig.timezone")
    calendars: List[CalendarSpec] = Field(description="Approved calendars, in order")
    titlefilters: List[str] = Field(default_factory=list)

    @field_validator("tokenfile")
    @classmethod
    def validate_tokenfile(cls, v: str) -> str:
        if not v:
            raise ValueError("tokenfile not specified")
        return _expand_home(v)

    @field_validator("orgfile", mode="before")
    @classmethod
    def validate_orgfile(cls, v: Any) -> str:
        return _expand_home(str(v)) if v else ""

    @field_validator("tagname", mode="before")
    @classmethod
    def validate_tagname(cls, v: Any) -> str:
        return str(v) if v else ""

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: Optional[str]) -> Optional[str]:
        return _validate_timezone(v)

    @field_validator("calendars", mode="before")
    @classmethod
    def parse_calendar_mapping(cls, v: Any) -> Any:
        """Turn the ``tag: calendar-id`` mapping into ordered specs."""
        if isinstance(v, dict):
            for tag, calendar_id in v.items():
                if not isinstance(calendar_id, str) or not calendar_id:
                    raise ValueError(f"No calendar id given for tag {tag}")
            v = [
                {"tag": str(tag).upper(), "calendar_id": calendar_id}
                for tag, calendar_id in v.items()
            ]
        if not v:
            raise ValueError("No calendar is specified")
        return v

    @field_validator("titlefilters", mode="before")
    @classmethod
    def validate_titlefilters(cls, v: Any) -> Any:
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        return [str(f) for f in v]


def read_profiles(path: str) -> Dict[str, Any]:
    """Read the raw YAML profile file."""
    path = _expand_home(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigurationError(f"Cannot read configuration {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration {path} must be a mapping of profiles")
    return data


def load_profile(name: str, path: Optional[str] = None) -> CalendarProfile:
    """Load and validate the named calendar profile.

    Args:
        name: Top-level key of the profile in the YAML file
        path: Profile file, defaults to ``AppConfig.config_file``

    Raises:
        ConfigurationError: If the profile is absent or incomplete
    """
    profiles = read_profiles(path or get_current_config().config_file)
    stanza = profiles.get(name)
    if not isinstance(stanza, dict):
        raise ConfigurationError(
            f"Cannot find calendar stanza for calendar: {name} in configuration"
        )
    try:
        profile = CalendarProfile(name=name, **stanza)
    except (ValidationError, TypeError) as e:
        raise ConfigurationError(f"Incorrect configuration for {name}: {e}") from e

    logger.debug(
        f"Loaded profile {name} with {len(profile.calendars)} calendars "
        f"and {len(profile.titlefilters)} title filters"
    )
    return profile


def load_default_config() -> AppConfig:
    """Load configuration from environment variables with defaults."""
    # Load environment variables from .env file
    load_dotenv()

    return AppConfig(
        config_file=os.getenv("GCALORG_CONFIG", DEFAULT_CONFIG_FILE),
        google_credentials_file=_expand_home(
            os.getenv("GOOGLE_CREDENTIALS_FILE", "credentials.json")
        ),
        timezone=os.getenv("GCALORG_TIMEZONE") or None,
        log_level=os.getenv("LOG_LEVEL", "INFO"),
    )


# Singleton config instance
_config: Optional[AppConfig] = None


def get_current_config() -> AppConfig:
    """Get the current application configuration (singleton)."""
    global _config
    if _config is None:
        _config = load_default_config()
    return _config


def resolve_timezone(profile: CalendarProfile, config: AppConfig) -> tzinfo:
    """Timezone for rendered times: profile, then environment, then system."""
    name = profile.timezone or config.timezone
    if name:
        return ZoneInfo(name)
    local = datetime.now().astimezone().tzinfo
    assert local is not None
    return local
