"""
Static configuration for Switchboard.

Purpose
-------
Centralized configuration loaded from environment variables (with ``.env``
support) and sensible defaults. Values are read once at startup; nothing here
changes at runtime.

Responsibilities
----------------
- Load configuration from the environment with type validation
- Validate critical settings (the Discord token) before the bot starts
- Expose environment checks and a redacted summary for logging

Non-Responsibilities
--------------------
- Per-module configuration (passed to modules by the application)
- Secrets management (use environment variables)

Environment Variables
---------------------
Required:
- DISCORD_TOKEN: Bot authentication token

Optional (with defaults):
- ENVIRONMENT: development | testing | staging | production (default: development)
- LOG_LEVEL: Logging level (default: INFO)
- LOG_JSON: Force JSON console logs (default: production only)
- LOG_COLORS: Colored console logs in a TTY (default: True)
- LOGS_DIR: Directory for the rotating JSON log file (default: ./logs)
- DATABASE_URL: SQLAlchemy async URL; enables the storage connection
- DATABASE_ECHO: Echo SQL statements (default: False)
- DATABASE_POOL_SIZE: Connection pool size (default: 5)
- DEFAULT_GUILD_IDS: Comma-separated guild IDs for command registration
- SYNC_COMMANDS: Register commands with Discord on startup (default: True)
"""

from __future__ import annotations

import logging
import os
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

from switchboard.core.exceptions import ConfigurationError

load_dotenv()

_log = logging.getLogger(__name__)


class Environment(Enum):
    """Deployment environment types."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    STAGING = "staging"
    PRODUCTION = "production"

    @classmethod
    def from_string(cls, value: str) -> "Environment":
        """
        Parse environment string safely with fallback.

        Example
        -------
        >>> Environment.from_string("PRODUCTION") is Environment.PRODUCTION
        True
        >>> Environment.from_string("invalid") is Environment.DEVELOPMENT
        True
        """
        try:
            return cls(value.strip().lower())
        except ValueError:
            _log.warning("Unknown environment '%s', defaulting to development", value)
            return cls.DEVELOPMENT


class Config:
    """
    Centralized static configuration for a Switchboard bot.

    Singleton via class attributes; call ``Config.load()`` (or
    ``Config.validate()``, which loads first) before reading values.

    Usage
    -----
    >>> Config.validate()
    >>> token = Config.DISCORD_TOKEN
    >>> if Config.is_production():
    ...     ...
    """

    _loaded: bool = False

    # Discord
    DISCORD_TOKEN: str = ""
    DEFAULT_GUILD_IDS: List[int] = []
    SYNC_COMMANDS: bool = True

    # Environment / logging
    ENVIRONMENT: Environment = Environment.DEVELOPMENT
    LOG_LEVEL: str = "INFO"
    LOG_JSON: Optional[bool] = None
    LOG_COLORS: bool = True
    LOGS_DIR: Path = Path.cwd() / "logs"

    # Storage
    DATABASE_URL: Optional[str] = None
    DATABASE_ECHO: bool = False
    DATABASE_POOL_SIZE: int = 5

    # ------------------------------------------------------------------ #
    # Safe parsers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _safe_str(key: str, default: Optional[str] = None) -> Optional[str]:
        value = os.getenv(key)
        if value is None or not value.strip():
            return default
        return value.strip()

    @staticmethod
    def _safe_int(
        key: str,
        default: int,
        min_val: Optional[int] = None,
        max_val: Optional[int] = None,
    ) -> int:
        """
        Parse an integer from the environment with bounds checking.

        Invalid or out-of-range values log a warning and fall back to
        ``default``.
        """
        raw_value = os.getenv(key)
        if raw_value is None:
            return default

        try:
            value = int(raw_value)
        except ValueError:
            _log.warning("%s='%s' is not a valid integer, using default %s", key, raw_value, default)
            return default

        if min_val is not None and value < min_val:
            _log.warning("%s=%s is below minimum %s, using default %s", key, value, min_val, default)
            return default
        if max_val is not None and value > max_val:
            _log.warning("%s=%s exceeds maximum %s, using default %s", key, value, max_val, default)
            return default
        return value

    @staticmethod
    def _safe_bool(key: str, default: Optional[bool]) -> Optional[bool]:
        """Recognizes true/false, yes/no, 1/0, on/off (case-insensitive)."""
        raw_value = os.getenv(key)
        if raw_value is None:
            return default

        normalized = raw_value.strip().lower()
        if normalized in {"true", "yes", "1", "on"}:
            return True
        if normalized in {"false", "no", "0", "off"}:
            return False

        _log.warning("%s='%s' is not a valid boolean, using default %s", key, raw_value, default)
        return default

    @staticmethod
    def _safe_int_list(key: str) -> List[int]:
        raw_value = os.getenv(key)
        if not raw_value:
            return []

        values: List[int] = []
        for part in raw_value.split(","):
            part = part.strip()
            if not part:
                continue
            try:
                values.append(int(part))
            except ValueError:
                _log.warning("%s contains non-integer entry '%s', ignoring it", key, part)
        return values

    # ------------------------------------------------------------------ #
    # Loading / validation
    # ------------------------------------------------------------------ #

    @classmethod
    def load(cls) -> None:
        """Load every configuration value from the environment."""
        cls.DISCORD_TOKEN = cls._safe_str("DISCORD_TOKEN", "") or ""
        cls.DEFAULT_GUILD_IDS = cls._safe_int_list("DEFAULT_GUILD_IDS")
        cls.SYNC_COMMANDS = bool(cls._safe_bool("SYNC_COMMANDS", True))

        cls.ENVIRONMENT = Environment.from_string(
            cls._safe_str("ENVIRONMENT", "development") or "development"
        )
        cls.LOG_LEVEL = (cls._safe_str("LOG_LEVEL", "INFO") or "INFO").upper()
        cls.LOG_JSON = cls._safe_bool("LOG_JSON", None)
        cls.LOG_COLORS = bool(cls._safe_bool("LOG_COLORS", True))
        logs_dir = cls._safe_str("LOGS_DIR")
        cls.LOGS_DIR = Path(logs_dir) if logs_dir else Path.cwd() / "logs"

        cls.DATABASE_URL = cls._safe_str("DATABASE_URL")
        cls.DATABASE_ECHO = bool(cls._safe_bool("DATABASE_ECHO", False))
        cls.DATABASE_POOL_SIZE = cls._safe_int("DATABASE_POOL_SIZE", 5, min_val=1, max_val=200)

        cls._loaded = True

    @classmethod
    def validate(cls) -> None:
        """
        Load and validate critical configuration values.

        Raises
        ------
        ConfigurationError:
            If DISCORD_TOKEN is missing.
        """
        cls.load()

        if not cls.DISCORD_TOKEN:
            raise ConfigurationError("DISCORD_TOKEN", "environment variable is required")

        valid_log_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if cls.LOG_LEVEL not in valid_log_levels:
            _log.warning("Invalid LOG_LEVEL '%s', using INFO", cls.LOG_LEVEL)
            cls.LOG_LEVEL = "INFO"

        if cls.is_production() and cls.DATABASE_URL and "localhost" in cls.DATABASE_URL:
            _log.warning("Production environment using localhost database - this may be incorrect")

    # ------------------------------------------------------------------ #
    # Environment checks
    # ------------------------------------------------------------------ #

    @classmethod
    def is_production(cls) -> bool:
        return cls.ENVIRONMENT is Environment.PRODUCTION

    @classmethod
    def is_development(cls) -> bool:
        return cls.ENVIRONMENT is Environment.DEVELOPMENT

    @classmethod
    def is_testing(cls) -> bool:
        return cls.ENVIRONMENT is Environment.TESTING

    @classmethod
    def get_config_summary(cls) -> Dict[str, Any]:
        """Non-sensitive configuration summary for startup logs."""
        return {
            "environment": cls.ENVIRONMENT.value,
            "log_level": cls.LOG_LEVEL,
            "discord_token_set": bool(cls.DISCORD_TOKEN),
            "database_url_set": bool(cls.DATABASE_URL),
            "database_pool_size": cls.DATABASE_POOL_SIZE,
            "default_guild_ids": list(cls.DEFAULT_GUILD_IDS),
            "sync_commands": cls.SYNC_COMMANDS,
        }


__all__ = ["Config", "Environment"]
