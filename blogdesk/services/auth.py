from __future__ import annotations

from typing import Tuple

import structlog

from blogdesk.models.user import User
from blogdesk.repositories.user import (
    MAX_FAILED_LOGINS,
    LOCKOUT_MINUTES,
    get_user_by_username,
    increment_failed_login_attempts,
    login_lock_remaining,
    record_login,
    reset_failed_login_attempts,
)
from blogdesk.utils.crypto import verify_password

log = structlog.get_logger(__name__)


def authenticate(username: str, password: str) -> Tuple[User | None, str | None]:
    """
    Authenticate user with lockout after repeated failures.
    Returns (user, error_message) tuple.
    """
    user = get_user_by_username(username)
    if not user:
        return None, "Invalid username or password"

    remaining = login_lock_remaining(user)
    if remaining is not None:
        minutes = min(max(1, int(remaining.total_seconds() / 60)), LOCKOUT_MINUTES)
        log.info("login_refused_locked", user_id=user.id)
        return None, (
            f"Account locked due to {MAX_FAILED_LOGINS} failed login attempts. "
            f"Please try again in {minutes} minutes."
        )

    if not verify_password(password, user.password_hash):
        increment_failed_login_attempts(user)
        log.info("login_failed", user_id=user.id, attempts=user.failed_login_attempts)
        attempts_remaining = MAX_FAILED_LOGINS - user.failed_login_attempts
        if attempts_remaining > 0:
            return None, f"Invalid username or password. {attempts_remaining} attempts remaining before account lockout."
        return None, (
            f"Invalid username or password. Account has been locked for {LOCKOUT_MINUTES} minutes "
            "due to too many failed attempts."
        )

    reset_failed_login_attempts(user)
    record_login(user)
    log.info("login_succeeded", user_id=user.id)
    return user, None
