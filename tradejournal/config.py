"""Configuration for the trade journal.

Settings live in ``~/.config/tradejournal/config.toml``. A missing or
unreadable file yields the defaults.
"""

import logging
from pathlib import Path
from typing import Literal, Optional

import toml
from pydantic import BaseModel, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".config" / "tradejournal"
CONFIG_PATH = CONFIG_DIR / "config.toml"


class StorageConfig(BaseModel):
    """Where accounts and trades are kept."""

    mode: Literal["local", "durable"] = Field(
        default="local", description="Primary store: local JSON or durable SQLite"
    )
    db_path: Path = Field(default=CONFIG_DIR / "journal.db", description="SQLite database")
    local_path: Path = Field(default=CONFIG_DIR / "local.json", description="Local JSON store")

    @field_validator("db_path", "local_path")
    @classmethod
    def _expand(cls, path: Path) -> Path:
        return path.expanduser()


class AnalyticsConfig(BaseModel):
    missing_pnl: Literal["loss", "break", "skip"] = Field(
        default="loss", description="Streak handling of closed trades without P&L"
    )


class ReviewConfig(BaseModel):
    interval_days: int = Field(default=3, ge=1, description="Days between review reminders")


class LoggingConfig(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING", description="Log level"
    )

    @field_validator("level", mode="before")
    @classmethod
    def _upper(cls, level):
        return level.upper() if isinstance(level, str) else level


class JournalConfig(BaseModel):
    """Top-level configuration."""

    storage: StorageConfig = Field(default_factory=StorageConfig)
    analytics: AnalyticsConfig = Field(default_factory=AnalyticsConfig)
    review: ReviewConfig = Field(default_factory=ReviewConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_config(path: Optional[Path] = None) -> JournalConfig:
    """Load configuration from TOML.

    Args:
        path: Config file; defaults to CONFIG_PATH.

    Returns:
        Parsed configuration, or defaults if the file is missing or invalid.
    """
    config_path = Path(path) if path else CONFIG_PATH

    if not config_path.exists():
        return JournalConfig()

    try:
        data = toml.load(config_path)
        return JournalConfig.model_validate(data)
    except (OSError, toml.TomlDecodeError, ValidationError) as e:
        logger.warning("Invalid config %s, using defaults: %s", config_path, e)
        return JournalConfig()


def save_config(config: JournalConfig, path: Optional[Path] = None) -> Path:
    """Write configuration as TOML, creating parent directories.

    Returns:
        Path the configuration was written to.
    """
    config_path = Path(path) if path else CONFIG_PATH
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, "w") as f:
        toml.dump(config.model_dump(mode="json"), f)
    return config_path
