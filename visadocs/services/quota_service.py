"""
Quota Service - per-user analysis limits.

The invariant ``analysis_count <= max_analyses`` is kept by a single
conditional UPDATE:

    UPDATE users SET analysis_count = analysis_count + 1
    WHERE id = :id AND analysis_count < max_analyses

Concurrent requests can all pass check_quota(), but only as many of them as
there are remaining analyses can make that UPDATE touch a row. The caller
runs consume_quota() in the same session as the row insert, so the
increment and the insert commit (or roll back) together.

Admins are exempt.
"""

import logging

from sqlalchemy import text
from sqlalchemy.orm import Session

from visadocs.core.errors import NotFoundError, QuotaExceededError
from visadocs.models import User

logger = logging.getLogger(__name__)


def _load_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def check_quota(db: Session, user_id: int) -> None:
    """Cheap early rejection before any extraction work is done."""
    user = _load_user(db, user_id)
    if user.is_admin:
        return
    if user.analysis_count >= user.max_analyses:
        raise QuotaExceededError(
            f"Analysis limit reached ({user.analysis_count}/{user.max_analyses}). "
            "Contact an administrator to increase your quota."
        )


def consume_quota(db: Session, user_id: int) -> bool:
    """
    Atomically take one analysis from the user's quota.

    Returns True if the increment happened, False if the user was already at
    the limit. Does not commit.
    """
    result = db.execute(
        text("""
            UPDATE users SET analysis_count = analysis_count + 1
            WHERE id = :id AND analysis_count < max_analyses
        """),
        {"id": user_id}
    )
    if result.rowcount != 1:
        logger.info("Quota exhausted for user %s", user_id)
        return False
    return True


def consume_quota_or_raise(db: Session, user: User) -> None:
    """consume_quota() for a request user; admins pass through untouched."""
    if user.is_admin:
        return
    if not consume_quota(db, user.id):
        raise QuotaExceededError()


def get_usage(db: Session, user_id: int) -> dict:
    user = _load_user(db, user_id)
    return {
        "analysis_count": user.analysis_count,
        "max_analyses": user.max_analyses,
        "remaining": max(0, user.max_analyses - user.analysis_count),
        "unlimited": user.is_admin,
    }
