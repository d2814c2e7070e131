"""
Admin login helpers.

There is exactly one account that may log in: the configured admin user.
Passwords are stored as given and compared in constant time.
"""

from __future__ import annotations

import hmac
import logging
from typing import Optional

from planner.db import DbClient, UserRecord

logger = logging.getLogger(__name__)


def ensure_admin_user(db: DbClient, username: str, password: str) -> UserRecord:
    """Create the admin user unless one already exists."""
    existing = db.get_user_by_username(username)
    if existing:
        return existing
    user = db.create_user(username, password)
    logger.info("Admin user %r created", username)
    return user


def authenticate(
    db: DbClient, username: str, password: str, *, admin_username: str = "admin"
) -> Optional[UserRecord]:
    if username != admin_username:
        return None
    user = db.get_user_by_username(username)
    if not user:
        return None
    if not hmac.compare_digest(user.password.encode("utf-8"), password.encode("utf-8")):
        return None
    return user
