# barberbook/config.py
"""
Service configuration with environment variable overrides.

Values are read once at import time; a .env file in the working
directory is honoured.
"""

import logging
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)


def _env_number(env_var: str, default: str, cast=int):
    """Read a numeric setting, naming the variable when the value is unusable."""
    raw = os.getenv(env_var, default)
    try:
        return cast(raw)
    except (ValueError, TypeError):
        raise ValueError(f"{env_var} must be a {cast.__name__}, got {raw!r}") from None


def _env_flag(env_var: str, default: str) -> bool:
    return os.getenv(env_var, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class DatabaseConfig:
    """Connection settings for the appointment store."""

    url: str = os.getenv("DATABASE_URL", "sqlite:///./barber.db")
    echo: bool = _env_flag("SQL_ECHO", "false")
    # upper bound for a single store call (lock wait / statement time)
    timeout_seconds: float = _env_number("STORE_TIMEOUT_SECONDS", "5", float)


@dataclass(frozen=True)
class BookingConfig:
    """Rules applied by the availability engine and reservation writer."""

    default_slot_minutes: int = _env_number("DEFAULT_SLOT_MINUTES", "60")
    phone_min_digits: int = _env_number("PHONE_MIN_DIGITS", "10")
    phone_max_digits: int = _env_number("PHONE_MAX_DIGITS", "13")
    client_name_max_length: int = _env_number("CLIENT_NAME_MAX_LENGTH", "120")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    booking: BookingConfig = field(default_factory=BookingConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    app_name: str = os.getenv("APP_NAME", "barberbook")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    if config.database.timeout_seconds <= 0:
        raise ValueError(
            f"STORE_TIMEOUT_SECONDS must be > 0, got {config.database.timeout_seconds}"
        )
    if config.booking.default_slot_minutes < 1:
        raise ValueError(
            f"DEFAULT_SLOT_MINUTES must be >= 1, got {config.booking.default_slot_minutes}"
        )
    if config.booking.phone_min_digits < 1:
        raise ValueError(
            f"PHONE_MIN_DIGITS must be >= 1, got {config.booking.phone_min_digits}"
        )
    if config.booking.phone_max_digits < config.booking.phone_min_digits:
        raise ValueError(
            "PHONE_MAX_DIGITS must be >= PHONE_MIN_DIGITS, "
            f"got {config.booking.phone_max_digits} < {config.booking.phone_min_digits}"
        )
    if config.booking.client_name_max_length < 1:
        raise ValueError(
            f"CLIENT_NAME_MAX_LENGTH must be >= 1, got {config.booking.client_name_max_length}"
        )


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logger.info("Configuration loaded for '%s'", config.app_name)
    return config


# Singleton instance
settings = load_config()
