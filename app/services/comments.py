"""Comment service: lunch reviews on a diner, visible to the author or the company."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from app.db import crud
from app.errors import CommentNotFoundError
from app.models import Comment, SHARE_COMPANY
from app.schemas import CommentsSort, ShareStatus
from app.services.auth import AuthContext
from app.services.diners import get_company_diner


def is_visible(comment: Comment, auth: AuthContext) -> bool:
    """Company-shared comments of the member's company, or the member's own."""
    if comment.diner is None or comment.diner.company_id != auth.company_id:
        return False
    return comment.share_status == SHARE_COMPANY or comment.member_id == auth.member_id


async def create_comment(
    db: AsyncSession, auth: AuthContext, diner_id: str, content: str, share_status: ShareStatus,
) -> Comment:
    diner = await get_company_diner(db, auth, diner_id)
    return await crud.create_comment(db, diner.id, auth.member_id, content, share_status.value)


async def get_comments_list(
    db: AsyncSession, auth: AuthContext, diner_id: str, page: int, size: int,
    sort: CommentsSort = CommentsSort.CREATED_AT_DESC,
    commented_by: str | None = None, keyword: str | None = None,
) -> tuple[list[Comment], int]:
    diner = await get_company_diner(db, auth, diner_id)
    return await crud.list_visible_comments(
        db, diner.id, auth.member_id,
        commented_by=commented_by, keyword=keyword,
        newest_first=sort == CommentsSort.CREATED_AT_DESC,
        offset=page * size, limit=size,
    )


async def _get_own_comment(db: AsyncSession, auth: AuthContext, diner_id: str, comment_id: str) -> Comment:
    comment = await crud.get_comment_by_author_email(db, comment_id, auth.email)
    if not comment or comment.diner_id != diner_id:
        raise CommentNotFoundError()
    return comment


async def update_comment(
    db: AsyncSession, auth: AuthContext, diner_id: str, comment_id: str,
    content: str, share_status: ShareStatus,
) -> Comment:
    comment = await _get_own_comment(db, auth, diner_id, comment_id)
    return await crud.update_comment(db, comment, content=content, share_status=share_status.value)


async def delete_comment(db: AsyncSession, auth: AuthContext, diner_id: str, comment_id: str) -> None:
    comment = await _get_own_comment(db, auth, diner_id, comment_id)
    await crud.delete_comment(db, comment)


async def get_visible_comment(db: AsyncSession, auth: AuthContext, diner_id: str, comment_id: str) -> Comment:
    comment = await crud.get_comment(db, comment_id)
    if not comment or comment.diner_id != diner_id or not is_visible(comment, auth):
        raise CommentNotFoundError()
    return comment
