"""
Application configuration.

Settings are read from environment variables. A ``.env`` file in the
working directory is loaded first so local development does not need
exported variables.
"""
import logging
import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    """
    Runtime settings.

    Attributes:
        database_url: SQLAlchemy database URL
        sql_echo: Whether SQLAlchemy echoes emitted SQL
        log_level: Root log level name for scripts
        default_event_timezone: Zone used when an event has no usable timezone
        time_format: strftime pattern for event time-of-day display
    """
    database_url: str = "sqlite:///./admissions.db"
    sql_echo: bool = False
    log_level: str = "INFO"
    default_event_timezone: str = "UTC"
    time_format: str = "%I:%M %p"


@lru_cache()
def get_settings() -> Settings:
    """Load settings once per process."""
    load_dotenv()
    defaults = Settings()
    return Settings(
        database_url=os.getenv("DATABASE_URL", defaults.database_url),
        sql_echo=_env_bool("SQL_ECHO", defaults.sql_echo),
        log_level=os.getenv("LOG_LEVEL", defaults.log_level).upper(),
        default_event_timezone=os.getenv(
            "DEFAULT_EVENT_TIMEZONE", defaults.default_event_timezone
        ),
        time_format=os.getenv("TIME_FORMAT", defaults.time_format),
    )


def configure_logging(level: str = None) -> None:
    """Install a basic stream handler for scripts and local runs."""
    logging.basicConfig(
        level=(level or get_settings().log_level),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
