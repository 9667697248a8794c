"""Reply service: replies to comments, editable only by their author."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from app.db import crud
from app.errors import ReplyNotFoundError
from app.models import Reply
from app.services.auth import AuthContext
from app.services.comments import get_visible_comment


async def create_reply(
    db: AsyncSession, auth: AuthContext, diner_id: str, comment_id: str, content: str,
) -> Reply:
    comment = await get_visible_comment(db, auth, diner_id, comment_id)
    return await crud.create_reply(db, comment.id, auth.member_id, content)


async def get_reply_list(
    db: AsyncSession, auth: AuthContext, diner_id: str, comment_id: str, page: int, size: int,
) -> tuple[list[Reply], int]:
    comment = await get_visible_comment(db, auth, diner_id, comment_id)
    return await crud.list_replies(db, comment.id, offset=page * size, limit=size)


async def _get_own_reply(db: AsyncSession, auth: AuthContext, comment_id: str, reply_id: str) -> Reply:
    reply = await crud.get_reply(db, reply_id)
    if not reply or reply.member_id != auth.member_id or reply.comment_id != comment_id:
        raise ReplyNotFoundError()
    return reply


async def update_reply(
    db: AsyncSession, auth: AuthContext, comment_id: str, reply_id: str, content: str,
) -> Reply:
    reply = await _get_own_reply(db, auth, comment_id, reply_id)
    return await crud.update_reply(db, reply, content=content)


async def delete_reply(db: AsyncSession, auth: AuthContext, comment_id: str, reply_id: str) -> None:
    reply = await _get_own_reply(db, auth, comment_id, reply_id)
    await crud.delete_reply(db, reply)
