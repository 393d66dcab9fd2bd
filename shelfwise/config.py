"""
Configuration for Shelfwise.

Two layers:
- Configuration: user preferences loaded from an optional JSON file and
  merged over defaults (shelf/publisher rules, ignored authors, the shelf
  percentile threshold). Validated with pydantic before reaching the engines.
- Settings: process-level settings read from the environment (data
  directory, user ID, logging).
"""

import json
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional, Union

from dotenv import load_dotenv
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from shelfwise.errors import OperationalError

load_dotenv()


DEFAULT_SHELF_PERCENTILE = 75


class Configuration(BaseModel):
    """User configuration, read-only once loaded."""

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        populate_by_name=True,
    )

    ignore_authors: list[str] = Field(default_factory=list, alias="ignoreAuthors")
    ignore_shelves: list[str] = Field(default_factory=list, alias="ignoreShelves")
    merge_publishers: dict[str, list[str]] = Field(
        default_factory=dict,
        alias="mergePublishers",
    )
    merge_shelves: dict[str, list[str]] = Field(
        default_factory=dict,
        alias="mergeShelves",
    )
    shelf_percentile: int = Field(
        DEFAULT_SHELF_PERCENTILE,
        ge=0,
        le=100,
        alias="shelfPercentile",
    )


def load_config(
    path: Union[str, Path],
    allow_missing: bool = False,
) -> Configuration:
    """
    Load a configuration file.

    Args:
        path: Path to a JSON configuration file
        allow_missing: Return the defaults when the file does not exist

    Returns:
        Validated configuration

    Raises:
        OperationalError: If the file is missing, unreadable or invalid
    """
    path = Path(path)

    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        if allow_missing:
            logger.debug(f"No config file at {path}, using defaults")
            return Configuration()
        raise OperationalError(f"No config file found at path: {path}")

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise OperationalError(
            f"Invalid JSON found in configuration: {path}",
            detail=str(e),
        ) from e

    if not isinstance(data, dict):
        raise OperationalError(
            f"Invalid configuration: {path}",
            detail="The configuration must be a JSON object",
        )

    try:
        config = Configuration.model_validate(data)
    except ValidationError as e:
        raise OperationalError(f"Invalid configuration: {path}", detail=str(e)) from e

    logger.debug(f"Loaded configuration from {path}")
    return config


@dataclass
class Settings:
    """Process settings loaded from the environment."""

    data_dir: str = str(Path.home() / ".shelfwise")
    config_path: Optional[str] = None
    user_id: Optional[str] = None

    log_level: str = "INFO"
    log_time: bool = False

    cache_enabled: bool = True

    @property
    def default_config_path(self) -> Path:
        return Path(self.data_dir) / "config.json"

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from environment variables."""
        return cls(
            data_dir=os.getenv("SHELFWISE_DATA_DIR", cls.data_dir),
            config_path=os.getenv("SHELFWISE_CONFIG"),
            user_id=os.getenv("SHELFWISE_USER_ID"),
            log_level=os.getenv("SHELFWISE_LOG_LEVEL", cls.log_level).upper(),
            log_time=os.getenv("SHELFWISE_LOG_TIME", "false").lower() == "true",
            cache_enabled=os.getenv("SHELFWISE_CACHE", "true").lower() == "true",
        )


@lru_cache()
def get_settings() -> Settings:
    """Get cached process settings."""
    return Settings.from_env()
