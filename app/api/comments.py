from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.engine import get_db
from app.dependencies import require_auth
from app.schemas import CommentCreate, CommentRead, CommentsSort, CommentUpdate, Page
from app.services import comments
from app.services.auth import AuthContext

router = APIRouter(prefix="/diners/{diner_id}/comments", tags=["comments"])


@router.post("", response_model=CommentRead, status_code=201)
async def create_comment(
    diner_id: str,
    body: CommentCreate,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    return await comments.create_comment(db, auth, diner_id, body.content, body.share_status)


@router.get("", response_model=Page[CommentRead])
async def get_comments_list(
    diner_id: str,
    page: int = Query(default=0, ge=0),
    size: int = Query(default=10, ge=1, le=100),
    sort: CommentsSort = Query(default=CommentsSort.CREATED_AT_DESC),
    commented_by: str | None = Query(default=None),
    keyword: str | None = Query(default=None),
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    """Company-shared comments on the diner plus the member's own."""
    items, total = await comments.get_comments_list(
        db, auth, diner_id, page, size, sort, commented_by, keyword
    )
    return Page[CommentRead].of([CommentRead.model_validate(c) for c in items], total, page, size)


@router.put("/{comment_id}", response_model=CommentRead)
async def update_comment(
    diner_id: str,
    comment_id: str,
    body: CommentUpdate,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    return await comments.update_comment(
        db, auth, diner_id, comment_id, body.content, body.share_status
    )


@router.delete("/{comment_id}")
async def delete_comment(
    diner_id: str,
    comment_id: str,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    await comments.delete_comment(db, auth, diner_id, comment_id)
    return {"ok": True}
