from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.engine import get_db
from app.dependencies import require_auth
from app.schemas import Page, ReplyCreate, ReplyRead, ReplyUpdate
from app.services import replies
from app.services.auth import AuthContext

router = APIRouter(prefix="/diners/{diner_id}/comments/{comment_id}/replies", tags=["replies"])


@router.post("", response_model=ReplyRead, status_code=201)
async def create_reply(
    diner_id: str,
    comment_id: str,
    body: ReplyCreate,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    return await replies.create_reply(db, auth, diner_id, comment_id, body.content)


@router.get("", response_model=Page[ReplyRead])
async def get_reply_list(
    diner_id: str,
    comment_id: str,
    page: int = Query(default=0, ge=0),
    size: int = Query(default=10, ge=1, le=100),
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    """Newest replies first."""
    items, total = await replies.get_reply_list(db, auth, diner_id, comment_id, page, size)
    return Page[ReplyRead].of([ReplyRead.model_validate(r) for r in items], total, page, size)


@router.put("/{reply_id}", response_model=ReplyRead)
async def update_reply(
    diner_id: str,
    comment_id: str,
    reply_id: str,
    body: ReplyUpdate,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    return await replies.update_reply(db, auth, comment_id, reply_id, body.content)


@router.delete("/{reply_id}")
async def delete_reply(
    diner_id: str,
    comment_id: str,
    reply_id: str,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    await replies.delete_reply(db, auth, comment_id, reply_id)
    return {"ok": True}
