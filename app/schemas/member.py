from __future__ import annotations
from datetime import datetime
from typing import Annotated
from pydantic import AfterValidator, BaseModel, Field


def _normalize_email(value: str) -> str:
    value = value.strip().lower()
    local, _, domain = value.partition("@")
    if not local or not domain or "." not in domain:
        raise ValueError("invalid email address")
    return value


Email = Annotated[str, AfterValidator(_normalize_email)]


class SignUpRequest(BaseModel):
    email: Email
    password: str = Field(min_length=8, max_length=100)
    name: str = Field(min_length=1, max_length=100)


class SignInRequest(BaseModel):
    email: Email
    password: str


class SignInResponse(BaseModel):
    token: str


class VerifyCodeRequest(BaseModel):
    code: str = Field(min_length=1, max_length=20)


class MemberRead(BaseModel):
    id: str
    email: str
    name: str
    role: str
    company_id: str | None = None
    created_at: datetime

    model_config = {"from_attributes": True}


class MemberUpdate(BaseModel):
    name: str = Field(min_length=1, max_length=100)


class PasswordChangeRequest(BaseModel):
    old_password: str
    new_password: str = Field(min_length=8, max_length=100)


class WithdrawRequest(BaseModel):
    password: str


class ChooseCompanyRequest(BaseModel):
    company_id: str
