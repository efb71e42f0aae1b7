# barberbook/db.py

import logging

from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine, Session

from barberbook.config import DatabaseConfig, settings

logger = logging.getLogger(__name__)


def _connect_args(config: DatabaseConfig) -> dict:
    if config.url.startswith("sqlite"):
        return {
            "check_same_thread": False,  # required for SQLite + FastAPI
            "timeout": config.timeout_seconds,  # busy wait on a locked file
        }
    if config.url.startswith("postgresql"):
        timeout_ms = int(config.timeout_seconds * 1000)
        return {
            "connect_timeout": max(1, int(config.timeout_seconds)),
            "options": f"-c statement_timeout={timeout_ms}",
        }
    return {}


def build_engine(config: DatabaseConfig = settings.database) -> Engine:
    return create_engine(
        config.url,
        echo=config.echo,
        connect_args=_connect_args(config),
    )


# Engine = connection to the database
engine = build_engine()


def init_db(bind: Engine = engine) -> None:
    """Create tables, indexes and overlap guards if they are missing."""
    import barberbook.models  # noqa: F401  registers the tables

    SQLModel.metadata.create_all(bind)
    logger.info("Appointment store ready at %s", bind.url.render_as_string(hide_password=True))


# Dependency: one session per request
def get_session():
    with Session(engine) as session:
        yield session
