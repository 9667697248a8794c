"""Membership models: Company, Member, Verification."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import String, DateTime, Float, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, ULIDMixin, UpdatedAtMixin

ROLE_VIEWER = "viewer"
ROLE_EDITOR = "editor"


class Company(Base, ULIDMixin, UpdatedAtMixin):
    __tablename__ = "companies"

    name: Mapped[str] = mapped_column(String(255))
    address: Mapped[str] = mapped_column(String(500), default="")
    latitude: Mapped[float] = mapped_column(Float)
    longitude: Mapped[float] = mapped_column(Float)
    domain: Mapped[str] = mapped_column(String(255), unique=True, index=True)


class Member(Base, ULIDMixin, UpdatedAtMixin):
    __tablename__ = "members"

    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255))
    name: Mapped[str] = mapped_column(String(100))
    role: Mapped[str] = mapped_column(String(20), default=ROLE_VIEWER)  # viewer | editor
    company_id: Mapped[str | None] = mapped_column(
        String(26), ForeignKey("companies.id", ondelete="SET NULL"), nullable=True
    )

    @property
    def email_domain(self) -> str:
        return self.email.rsplit("@", 1)[-1].lower()

    def promote_to_editor(self) -> None:
        self.role = ROLE_EDITOR


class Verification(Base, ULIDMixin):
    __tablename__ = "verifications"

    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    code: Mapped[str] = mapped_column(String(20))
    expiration_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
