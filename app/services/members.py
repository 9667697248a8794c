"""Member service: sign up/in, email verification, profile changes."""

from __future__ import annotations

import logging
import secrets
from datetime import datetime, timezone, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.db import crud
from app.errors import (
    AlreadyExistMemberError, IncorrectPasswordError, MemberNotExistError,
    MemberUnauthorizedError, VerificationCodeNotFoundError,
)
from app.models import Member, Verification, ROLE_VIEWER
from app.services.auth import AuthContext, hash_password, verify_password, create_access_token
from app.services.email import send_verification_code_email

logger = logging.getLogger(__name__)

_settings = get_settings()


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value


def generate_verification_code(length: int) -> str:
    return "".join(secrets.choice("0123456789") for _ in range(length))


async def sign_up(db: AsyncSession, email: str, password: str, name: str) -> Member:
    if await crud.member_exists(db, email):
        raise AlreadyExistMemberError()
    return await crud.create_member(db, email, hash_password(password), name, ROLE_VIEWER)


async def sign_in(db: AsyncSession, email: str, password: str) -> str:
    """Check credentials and return a bearer token."""
    member = await crud.get_member_by_email(db, email)
    if not member:
        raise MemberNotExistError()
    if not verify_password(password, member.password_hash):
        raise IncorrectPasswordError()
    return create_access_token(member.email, member.role)


async def send_verification_code(db: AsyncSession, email: str) -> Verification:
    conf = _settings.verification
    code = generate_verification_code(conf.code_length)

    send_verification_code_email(email, code, conf.valid_seconds)
    expiration_at = datetime.now(timezone.utc) + timedelta(seconds=conf.valid_seconds)
    return await crud.replace_verification(db, email, code, expiration_at)


async def verify_verification_code(
    db: AsyncSession, auth: AuthContext, code: str, now: datetime | None = None,
) -> Member:
    """Match the code sent to the member's email and promote them to editor."""
    now = now or datetime.now(timezone.utc)
    verification = await crud.get_verification_by_email(db, auth.email)
    if not verification:
        raise VerificationCodeNotFoundError()
    if now > _as_utc(verification.expiration_at):
        raise VerificationCodeNotFoundError()
    if not secrets.compare_digest(verification.code.encode(), code.encode()):
        raise VerificationCodeNotFoundError()

    member = await crud.get_member_by_email(db, auth.email)
    if not member:
        raise MemberNotExistError()
    member.promote_to_editor()
    await crud.delete_verification(db, verification)
    await db.refresh(member)
    return member


async def get_own_member(db: AsyncSession, auth: AuthContext, member_id: str) -> Member:
    """Load a member only if it is the authenticated one."""
    member = await crud.get_member_by_id_and_email(db, member_id, auth.email)
    if not member:
        raise MemberUnauthorizedError()
    return member


async def update_member(db: AsyncSession, auth: AuthContext, member_id: str, name: str) -> Member:
    member = await get_own_member(db, auth, member_id)
    return await crud.update_member(db, member, name=name)


async def change_password(
    db: AsyncSession, auth: AuthContext, member_id: str, old_password: str, new_password: str,
) -> Member:
    member = await get_own_member(db, auth, member_id)
    if not verify_password(old_password, member.password_hash):
        raise IncorrectPasswordError()
    return await crud.update_member(db, member, password_hash=hash_password(new_password))


async def withdraw_member(db: AsyncSession, auth: AuthContext, member_id: str, password: str) -> None:
    member = await get_own_member(db, auth, member_id)
    if not verify_password(password, member.password_hash):
        raise IncorrectPasswordError()
    await crud.delete_member(db, member)
    logger.info("Member %s withdrew", member_id)


async def clear_unused_verification_codes(db: AsyncSession, now: datetime | None = None) -> int:
    rows = await crud.delete_expired_verifications(db, now or datetime.now(timezone.utc))
    logger.info("clear_unused_verification_codes executed: %d rows deleted", rows)
    return rows
