"""
Comment moderation.

Route summary
-------------
GET    /api/admin/comments                         paginated queue (status=pending|approved, search)
POST   /api/admin/comments/bulk-approve            approve every listed id
POST   /api/admin/comments/bulk-delete             delete every listed id
POST   /api/admin/comments/{comment_id}/approve
POST   /api/admin/comments/{comment_id}/unapprove
POST   /api/admin/comments/{comment_id}/toggle-approval
DELETE /api/admin/comments/{comment_id}
"""
import logging
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import get_db
from app.models.database_models import BlogComment
from app.models.schemas import BulkActionResponse, BulkIdsRequest, CommentListResponse, CommentResponse
from app.services.repository import count_where, get_or_404, load_by_ids, paginate, search_filter

logger = logging.getLogger(__name__)

router = APIRouter()


async def _set_approval(db: AsyncSession, comment_id: int, approved: Optional[bool]) -> BlogComment:
    comment = await get_or_404(db, BlogComment, comment_id)
    comment.is_approved = (not comment.is_approved) if approved is None else approved
    await db.flush()
    logger.info("Comment id=%d approved=%s", comment.id, comment.is_approved)
    return comment


@router.get("", response_model=CommentListResponse)
async def list_comments(
    state: Optional[Literal["pending", "approved"]] = Query(None, alias="status"),
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.ADMIN_PAGE_SIZE, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    """Newest first, with queue counts."""
    stmt = select(BlogComment).order_by(BlogComment.created_at.desc(), BlogComment.id.desc())
    if state is not None:
        stmt = stmt.where(BlogComment.is_approved.is_(state == "approved"))
    term = search_filter(search, BlogComment.user_name, BlogComment.user_email, BlogComment.comment_body)
    if term is not None:
        stmt = stmt.where(term)

    rows, meta = await paginate(db, stmt, page, per_page)
    counts = {
        "total": await count_where(db, BlogComment.id),
        "pending": await count_where(db, BlogComment.id, BlogComment.is_approved.is_(False)),
        "approved": await count_where(db, BlogComment.id, BlogComment.is_approved.is_(True)),
    }
    return {"items": rows, **meta, "counts": counts}


@router.post("/bulk-approve", response_model=BulkActionResponse)
async def bulk_approve_comments(body: BulkIdsRequest, db: AsyncSession = Depends(get_db)) -> BulkActionResponse:
    comments = await load_by_ids(db, BlogComment, body.ids, "ids")
    await db.execute(
        update(BlogComment).where(BlogComment.id.in_([c.id for c in comments])).values(is_approved=True)
    )
    await db.flush()
    logger.info("Bulk-approved %d comment(s)", len(comments))
    return BulkActionResponse(message=f"{len(comments)} comment(s) approved.", affected=len(comments))


@router.post("/bulk-delete", response_model=BulkActionResponse)
async def bulk_delete_comments(body: BulkIdsRequest, db: AsyncSession = Depends(get_db)) -> BulkActionResponse:
    comments = await load_by_ids(db, BlogComment, body.ids, "ids")
    await db.execute(delete(BlogComment).where(BlogComment.id.in_([c.id for c in comments])))
    await db.flush()
    logger.info("Bulk-deleted %d comment(s)", len(comments))
    return BulkActionResponse(message=f"{len(comments)} comment(s) deleted.", affected=len(comments))


@router.post("/{comment_id}/approve", response_model=CommentResponse)
async def approve_comment(comment_id: int, db: AsyncSession = Depends(get_db)):
    return await _set_approval(db, comment_id, True)


@router.post("/{comment_id}/unapprove", response_model=CommentResponse)
async def unapprove_comment(comment_id: int, db: AsyncSession = Depends(get_db)):
    return await _set_approval(db, comment_id, False)


@router.post("/{comment_id}/toggle-approval", response_model=CommentResponse)
async def toggle_comment_approval(comment_id: int, db: AsyncSession = Depends(get_db)):
    return await _set_approval(db, comment_id, None)


@router.delete("/{comment_id}", status_code=status.HTTP_204_NO_CONTENT, response_model=None)
async def delete_comment(comment_id: int, db: AsyncSession = Depends(get_db)) -> None:
    comment = await get_or_404(db, BlogComment, comment_id)
    await db.delete(comment)
    await db.flush()
    logger.info("Deleted comment id=%d", comment_id)
