from __future__ import annotations

import logging
import os
from functools import lru_cache

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine, make_url

logger = logging.getLogger(__name__)

APPLICATION_NAME = "qrdine"


def _database_url() -> str:
    url = os.getenv("DATABASE_URL")
    if not url:
        raise RuntimeError("DATABASE_URL is not set")
    return url


def _pool_size() -> int:
    try:
        return max(1, int(os.getenv("DB_POOL_SIZE", "5")))
    except ValueError:
        return 5


def _engine_options(database_url: str, connect_timeout: int) -> dict[str, object]:
    backend = make_url(database_url).get_backend_name()
    if backend == "sqlite":
        return {"connect_args": {"check_same_thread": False}}

    options: dict[str, object] = {"pool_pre_ping": True, "pool_size": _pool_size()}
    if backend == "postgresql":
        options["connect_args"] = {
            "connect_timeout": connect_timeout,
            "application_name": APPLICATION_NAME,
        }
    return options


@lru_cache(maxsize=8)
def _build_engine(database_url: str, connect_timeout: int) -> Engine:
    return create_engine(database_url, **_engine_options(database_url, connect_timeout))


def get_engine(timeout_seconds: float = 1.0) -> Engine:
    return _build_engine(_database_url(), max(1, int(timeout_seconds)))


def ping_database(timeout_seconds: float = 1.0) -> bool:
    try:
        with get_engine(timeout_seconds).connect() as connection:
            connection.scalar(text("SELECT 1"))
    except Exception as exc:
        logger.warning("database_unreachable", extra={"error": str(exc)})
        return False
    return True
