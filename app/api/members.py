"""Member API: sign up/in, email verification, profile and company choice."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.engine import get_db
from app.dependencies import require_auth
from app.schemas import (
    ChooseCompanyRequest, MemberRead, MemberUpdate, PasswordChangeRequest,
    SignInRequest, SignInResponse, SignUpRequest, VerifyCodeRequest, WithdrawRequest,
)
from app.services import companies, members
from app.services.auth import AuthContext

router = APIRouter(tags=["members"])


@router.post("/signup", response_model=MemberRead, status_code=201)
async def sign_up(body: SignUpRequest, db: AsyncSession = Depends(get_db)):
    """Register with email, name and password. New members start as viewers."""
    return await members.sign_up(db, body.email, body.password, body.name)


@router.post("/signin", response_model=SignInResponse)
async def sign_in(body: SignInRequest, db: AsyncSession = Depends(get_db)):
    token = await members.sign_in(db, body.email, body.password)
    return SignInResponse(token=token)


@router.post("/members/verification/send")
async def send_verification_code(
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    """Email a short-lived numeric code to the signed-in member."""
    verification = await members.send_verification_code(db, auth.email)
    return {"ok": True, "expiration_at": verification.expiration_at}


@router.post("/members/verification/verify", response_model=MemberRead)
async def verify_verification_code(
    body: VerifyCodeRequest,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    return await members.verify_verification_code(db, auth, body.code)


@router.get("/members/me", response_model=MemberRead)
async def get_me(
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    return await members.get_own_member(db, auth, auth.member_id)


@router.put("/members/{member_id}", response_model=MemberRead)
async def update_member(
    member_id: str,
    body: MemberUpdate,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    return await members.update_member(db, auth, member_id, body.name)


@router.put("/members/{member_id}/password")
async def change_password(
    member_id: str,
    body: PasswordChangeRequest,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    await members.change_password(db, auth, member_id, body.old_password, body.new_password)
    return {"ok": True, "message": "Password updated"}


@router.delete("/members/{member_id}")
async def withdraw_member(
    member_id: str,
    body: WithdrawRequest,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    await members.withdraw_member(db, auth, member_id, body.password)
    return {"ok": True}


@router.put("/members/{member_id}/company", response_model=MemberRead)
async def choose_company(
    member_id: str,
    body: ChooseCompanyRequest,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    """Join a company whose domain matches the member's email domain."""
    return await companies.choose_company(db, auth, member_id, body.company_id)
