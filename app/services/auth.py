"""Authentication service: bcrypt passwords and JWT bearer tokens."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone, timedelta

import bcrypt
import jwt

from app.config import get_settings
from app.models.auth_models import Member, ROLE_EDITOR

_settings = get_settings()


@dataclass
class AuthContext:
    member_id: str
    email: str
    name: str
    role: str  # 'viewer' | 'editor'
    company_id: str | None

    @property
    def is_editor(self) -> bool:
        return self.role == ROLE_EDITOR

    @classmethod
    def from_member(cls, member: Member) -> "AuthContext":
        return cls(
            member_id=member.id,
            email=member.email,
            name=member.name,
            role=member.role,
            company_id=member.company_id,
        )


def hash_password(plain: str) -> str:
    return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))


def create_access_token(email: str, role: str, expires_delta: timedelta | None = None) -> str:
    """Issue a signed JWT whose subject is the member email."""
    jwt_conf = _settings.jwt
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=jwt_conf.expire_minutes))
    payload = {"sub": email, "role": role, "iat": now, "exp": expire}
    return jwt.encode(payload, jwt_conf.secret_key, algorithm=jwt_conf.algorithm)


def decode_access_token(token: str) -> dict | None:
    """Return the token payload, or None if the signature or expiry check fails."""
    jwt_conf = _settings.jwt
    try:
        return jwt.decode(token, jwt_conf.secret_key, algorithms=[jwt_conf.algorithm])
    except jwt.PyJWTError:
        return None
