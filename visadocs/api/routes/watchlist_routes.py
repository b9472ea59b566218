"""
Watchlist Routes

POST /watchlist/add - Save a scholarship (409 if already saved)
DELETE /watchlist/remove/{scholarship_id} - Remove it
GET /watchlist - My saved scholarships
PATCH /watchlist/update/{id} - Notes, priority, application status
GET /watchlist/check/{scholarship_id} - Is it saved?
"""

from fastapi import APIRouter, HTTPException, Depends
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from typing import List

from visadocs.db.postgres import get_db_session
from visadocs.core.auth import get_current_user
from visadocs.models import Scholarship, User, WatchlistItem
from visadocs.schemas.schemas import (
    MessageResponse, WatchlistAdd, WatchlistCheckResponse, WatchlistItemResponse, WatchlistUpdate
)

router = APIRouter(prefix="/watchlist", tags=["Watchlist"])


def _find_item(db, user_id: int, scholarship_id: int):
    return db.scalar(
        select(WatchlistItem).where(
            WatchlistItem.user_id == user_id, WatchlistItem.scholarship_id == scholarship_id
        )
    )


@router.post("/add", response_model=WatchlistItemResponse, status_code=201)
async def add_to_watchlist(data: WatchlistAdd, user: User = Depends(get_current_user)):
    """Name, provider, funding type and deadline are copied from the scholarship."""
    try:
        with get_db_session() as db:
            scholarship = db.get(Scholarship, data.scholarship_id)
            if not scholarship:
                raise HTTPException(status_code=404, detail="Scholarship not found")
            if _find_item(db, user.id, data.scholarship_id):
                raise HTTPException(status_code=409, detail="Scholarship already in watchlist")

            item = WatchlistItem(
                user_id=user.id,
                scholarship_id=scholarship.id,
                scholarship_name=scholarship.scholarship_name,
                provider_name=scholarship.provider_name,
                funding_type=scholarship.funding_type,
                application_deadline=scholarship.application_deadline,
                notes=data.notes,
                priority=data.priority.value,
                status="not_started",
            )
            db.add(item)
            db.flush()
    except IntegrityError:
        raise HTTPException(status_code=409, detail="Scholarship already in watchlist")

    return WatchlistItemResponse.model_validate(item)


@router.delete("/remove/{scholarship_id}", response_model=MessageResponse)
async def remove_from_watchlist(scholarship_id: int, user: User = Depends(get_current_user)):
    with get_db_session() as db:
        item = _find_item(db, user.id, scholarship_id)
        if not item:
            raise HTTPException(status_code=404, detail="Scholarship not in watchlist")
        db.delete(item)
    return MessageResponse(message="Removed from watchlist")


@router.get("", response_model=List[WatchlistItemResponse])
async def get_watchlist(user: User = Depends(get_current_user)):
    with get_db_session() as db:
        rows = db.scalars(
            select(WatchlistItem)
            .where(WatchlistItem.user_id == user.id)
            .order_by(WatchlistItem.created_at.desc(), WatchlistItem.id.desc())
        ).all()
    return [WatchlistItemResponse.model_validate(r) for r in rows]


@router.patch("/update/{item_id}", response_model=WatchlistItemResponse)
async def update_watchlist_item(item_id: int, data: WatchlistUpdate, user: User = Depends(get_current_user)):
    changes = data.model_dump(exclude_none=True, mode="json")
    if not changes:
        raise HTTPException(status_code=400, detail="No fields to update")

    with get_db_session() as db:
        item = db.get(WatchlistItem, item_id)
        if not item or item.user_id != user.id:
            raise HTTPException(status_code=404, detail="Watchlist item not found")
        for field, value in changes.items():
            setattr(item, field, value)
        db.flush()

    return WatchlistItemResponse.model_validate(item)


@router.get("/check/{scholarship_id}", response_model=WatchlistCheckResponse)
async def check_watchlist(scholarship_id: int, user: User = Depends(get_current_user)):
    with get_db_session() as db:
        item = _find_item(db, user.id, scholarship_id)
    return WatchlistCheckResponse(in_watchlist=item is not None, item_id=item.id if item else None)
