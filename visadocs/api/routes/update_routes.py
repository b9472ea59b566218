"""
Update (Notification) Routes

GET /updates - Active, unexpired updates for my audience, with read state
GET /updates/unread-count - Number of those I have not opened
POST /updates/{id}/view - Mark as read (idempotent)
"""

from datetime import datetime, timezone
from typing import List

from fastapi import APIRouter, HTTPException, Depends
from sqlalchemy import select, update as sql_update
from sqlalchemy.exc import IntegrityError

from visadocs.db.postgres import get_db_session
from visadocs.core.auth import get_current_user
from visadocs.models import Update, UpdateView, User
from visadocs.schemas.schemas import MessageResponse, UnreadCountResponse, UpdateResponse

router = APIRouter(prefix="/updates", tags=["Updates"])

# target_audience values a student account sees
STUDENT_AUDIENCES = ("all", "students")


def _is_expired(item: Update, now: datetime) -> bool:
    if item.expires_at is None:
        return False
    expires = item.expires_at
    if expires.tzinfo is None:
        # SQLite hands back naive datetimes; they are stored as UTC
        expires = expires.replace(tzinfo=timezone.utc)
    return expires <= now


def visible_updates(db, user: User) -> List[Update]:
    query = select(Update).where(Update.is_active.is_(True))
    if not user.is_admin:
        query = query.where(Update.target_audience.in_(STUDENT_AUDIENCES))
    rows = db.scalars(query.order_by(Update.created_at.desc(), Update.id.desc())).all()
    now = datetime.now(timezone.utc)
    return [u for u in rows if not _is_expired(u, now)]


def _read_ids(db, user_id: int) -> set:
    return set(db.scalars(select(UpdateView.update_id).where(UpdateView.user_id == user_id)).all())


@router.get("", response_model=List[UpdateResponse])
async def list_updates(user: User = Depends(get_current_user)):
    with get_db_session() as db:
        rows = visible_updates(db, user)
        read = _read_ids(db, user.id)

    return [
        UpdateResponse.model_validate(u).model_copy(update={"is_read": u.id in read})
        for u in rows
    ]


@router.get("/unread-count", response_model=UnreadCountResponse)
async def unread_count(user: User = Depends(get_current_user)):
    with get_db_session() as db:
        rows = visible_updates(db, user)
        read = _read_ids(db, user.id)
    return UnreadCountResponse(unread_count=sum(1 for u in rows if u.id not in read))


@router.post("/{update_id}/view", response_model=MessageResponse)
async def mark_viewed(update_id: int, user: User = Depends(get_current_user)):
    """First view records a receipt and bumps view_count; repeats are no-ops."""
    with get_db_session() as db:
        if not db.get(Update, update_id):
            raise HTTPException(status_code=404, detail="Update not found")
        already = db.scalar(
            select(UpdateView.id).where(UpdateView.update_id == update_id, UpdateView.user_id == user.id)
        )
        if already:
            return MessageResponse(message="Already marked as read")

    try:
        with get_db_session() as db:
            db.add(UpdateView(update_id=update_id, user_id=user.id))
            db.execute(
                sql_update(Update).where(Update.id == update_id).values(view_count=Update.view_count + 1)
            )
    except IntegrityError:
        # concurrent first views; the other request recorded it
        return MessageResponse(message="Already marked as read")

    return MessageResponse(message="Marked as read")
