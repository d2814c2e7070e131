"""
Dependency wiring for the FastAPI app.
"""

from __future__ import annotations

from planner.auth import ensure_admin_user
from planner.config import Settings, get_settings
from planner.db import DbClient, InMemoryDbClient, PostgresDbClient

_db_client: DbClient | None = None


def build_db_client(settings: Settings) -> DbClient:
    if settings.use_in_memory_backends or not settings.database_url:
        db: DbClient = InMemoryDbClient()
    else:
        db = PostgresDbClient(settings.database_url)
    ensure_admin_user(db, settings.admin_username, settings.admin_password)
    return db


def get_db_client() -> DbClient:
    """
    Return a singleton DB client so entries persist across requests.
    """
    global _db_client
    if _db_client:
        return _db_client
    _db_client = build_db_client(get_settings())
    return _db_client
