"""
Contact message inbox.

Route summary
-------------
GET    /api/admin/messages                          paginated inbox (filter=unread|read|replied|unreplied, search)
POST   /api/admin/messages/bulk-read
POST   /api/admin/messages/bulk-unread
POST   /api/admin/messages/bulk-delete
GET    /api/admin/messages/{message_id}             show (marks the message read)
PATCH  /api/admin/messages/{message_id}             set is_read / is_replied
POST   /api/admin/messages/{message_id}/toggle-read
POST   /api/admin/messages/{message_id}/toggle-replied
DELETE /api/admin/messages/{message_id}
"""
import logging
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import get_db
from app.models.database_models import ContactMessage
from app.models.schemas import (
    BulkActionResponse,
    BulkIdsRequest,
    ContactFlagsUpdate,
    ContactListResponse,
    ContactMessageResponse,
)
from app.services.repository import count_where, get_or_404, load_by_ids, paginate, search_filter

logger = logging.getLogger(__name__)

router = APIRouter()

_FILTERS = {
    "unread": ContactMessage.is_read.is_(False),
    "read": ContactMessage.is_read.is_(True),
    "replied": ContactMessage.is_replied.is_(True),
    "unreplied": ContactMessage.is_replied.is_(False),
}


async def _bulk_set_read(db: AsyncSession, ids, is_read: bool) -> int:
    messages = await load_by_ids(db, ContactMessage, ids, "ids")
    await db.execute(
        update(ContactMessage).where(ContactMessage.id.in_([m.id for m in messages])).values(is_read=is_read)
    )
    await db.flush()
    logger.info("Marked %d message(s) is_read=%s", len(messages), is_read)
    return len(messages)


@router.get("", response_model=ContactListResponse)
async def list_messages(
    state: Optional[Literal["unread", "read", "replied", "unreplied"]] = Query(None, alias="filter"),
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.ADMIN_PAGE_SIZE, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    stmt = select(ContactMessage).order_by(ContactMessage.created_at.desc(), ContactMessage.id.desc())
    if state is not None:
        stmt = stmt.where(_FILTERS[state])
    term = search_filter(
        search, ContactMessage.name, ContactMessage.email, ContactMessage.subject, ContactMessage.message
    )
    if term is not None:
        stmt = stmt.where(term)

    rows, meta = await paginate(db, stmt, page, per_page)
    counts = {
        "total": await count_where(db, ContactMessage.id),
        "unread": await count_where(db, ContactMessage.id, _FILTERS["unread"]),
        "unreplied": await count_where(db, ContactMessage.id, _FILTERS["unreplied"]),
    }
    return {"items": rows, **meta, "counts": counts}


@router.post("/bulk-read", response_model=BulkActionResponse)
async def bulk_mark_read(body: BulkIdsRequest, db: AsyncSession = Depends(get_db)) -> BulkActionResponse:
    affected = await _bulk_set_read(db, body.ids, True)
    return BulkActionResponse(message=f"{affected} message(s) marked as read.", affected=affected)


@router.post("/bulk-unread", response_model=BulkActionResponse)
async def bulk_mark_unread(body: BulkIdsRequest, db: AsyncSession = Depends(get_db)) -> BulkActionResponse:
    affected = await _bulk_set_read(db, body.ids, False)
    return BulkActionResponse(message=f"{affected} message(s) marked as unread.", affected=affected)


@router.post("/bulk-delete", response_model=BulkActionResponse)
async def bulk_delete_messages(body: BulkIdsRequest, db: AsyncSession = Depends(get_db)) -> BulkActionResponse:
    messages = await load_by_ids(db, ContactMessage, body.ids, "ids")
    await db.execute(delete(ContactMessage).where(ContactMessage.id.in_([m.id for m in messages])))
    await db.flush()
    logger.info("Bulk-deleted %d message(s)", len(messages))
    return BulkActionResponse(message=f"{len(messages)} message(s) deleted.", affected=len(messages))


@router.get("/{message_id}", response_model=ContactMessageResponse)
async def show_message(message_id: int, db: AsyncSession = Depends(get_db)):
    message = await get_or_404(db, ContactMessage, message_id)
    if not message.is_read:
        message.is_read = True
        await db.flush()
    return message


@router.patch("/{message_id}", response_model=ContactMessageResponse)
async def update_message_flags(
    message_id: int,
    body: ContactFlagsUpdate,
    db: AsyncSession = Depends(get_db),
):
    message = await get_or_404(db, ContactMessage, message_id)
    for key, value in body.model_dump(exclude_none=True).items():
        setattr(message, key, value)
    await db.flush()
    return message


@router.post("/{message_id}/toggle-read", response_model=ContactMessageResponse)
async def toggle_message_read(message_id: int, db: AsyncSession = Depends(get_db)):
    message = await get_or_404(db, ContactMessage, message_id)
    message.is_read = not message.is_read
    await db.flush()
    return message


@router.post("/{message_id}/toggle-replied", response_model=ContactMessageResponse)
async def toggle_message_replied(message_id: int, db: AsyncSession = Depends(get_db)):
    message = await get_or_404(db, ContactMessage, message_id)
    message.is_replied = not message.is_replied
    await db.flush()
    return message


@router.delete("/{message_id}", status_code=status.HTTP_204_NO_CONTENT, response_model=None)
async def delete_message(message_id: int, db: AsyncSession = Depends(get_db)) -> None:
    message = await get_or_404(db, ContactMessage, message_id)
    await db.delete(message)
    await db.flush()
    logger.info("Deleted contact message id=%d", message_id)
