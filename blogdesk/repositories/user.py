from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy.exc import IntegrityError

from blogdesk.extensions import db
from blogdesk.models.user import User

MAX_FAILED_LOGINS = 3
LOCKOUT_MINUTES = 15


def get_user_by_id(user_id: int) -> Optional[User]:
    return db.session.get(User, user_id)


def get_user_by_username(username: str) -> Optional[User]:
    return db.session.execute(db.select(User).filter_by(username=username)).scalar_one_or_none()


def create_user(*, username: str, email: str, password_hash: str, verified: bool = False) -> User:
    user = User(
        username=username,
        email=email,
        password_hash=password_hash,
        email_verified_at=datetime.now(timezone.utc) if verified else None,
    )
    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ValueError("user_conflict")
    return user


def mark_user_verified(user: User) -> User:
    if user.email_verified_at is None:
        user.email_verified_at = datetime.now(timezone.utc)
        db.session.commit()
    return user


def record_login(user: User) -> None:
    user.last_login = datetime.now(timezone.utc)
    db.session.commit()


def increment_failed_login_attempts(user: User) -> None:
    """Increment failed login attempts and set lockout if needed."""
    user.failed_login_attempts += 1
    if user.failed_login_attempts >= MAX_FAILED_LOGINS:
        user.login_locked_until = datetime.now(timezone.utc) + timedelta(minutes=LOCKOUT_MINUTES)
    db.session.commit()


def reset_failed_login_attempts(user: User) -> None:
    user.failed_login_attempts = 0
    user.login_locked_until = None
    db.session.commit()


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; treat them as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def login_lock_remaining(user: User) -> timedelta | None:
    """Return the remaining lockout, or None when the user may log in.

    An expired lockout is cleared as a side effect.
    """
    if user.login_locked_until is None:
        return None
    remaining = _as_utc(user.login_locked_until) - datetime.now(timezone.utc)
    if remaining.total_seconds() <= 0:
        reset_failed_login_attempts(user)
        return None
    return remaining
