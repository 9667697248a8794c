from __future__ import annotations

from sqlalchemy import String, Text, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base, ULIDMixin, UpdatedAtMixin

SHARE_ME = "ME"
SHARE_COMPANY = "COMPANY"


class Comment(Base, ULIDMixin, UpdatedAtMixin):
    __tablename__ = "comments"

    diner_id: Mapped[str] = mapped_column(
        String(26), ForeignKey("diners.id", ondelete="CASCADE"), index=True
    )
    member_id: Mapped[str] = mapped_column(
        String(26), ForeignKey("members.id", ondelete="CASCADE"), index=True
    )
    content: Mapped[str] = mapped_column(Text)
    share_status: Mapped[str] = mapped_column(String(20), default=SHARE_COMPANY)  # ME | COMPANY

    member = relationship("Member", lazy="selectin")
    diner = relationship("Diner", lazy="selectin")

    @property
    def member_name(self) -> str:
        return self.member.name if self.member else ""


class Reply(Base, ULIDMixin, UpdatedAtMixin):
    __tablename__ = "replies"

    comment_id: Mapped[str] = mapped_column(
        String(26), ForeignKey("comments.id", ondelete="CASCADE"), index=True
    )
    member_id: Mapped[str] = mapped_column(
        String(26), ForeignKey("members.id", ondelete="CASCADE"), index=True
    )
    content: Mapped[str] = mapped_column(Text)

    member = relationship("Member", lazy="selectin")

    @property
    def member_name(self) -> str:
        return self.member.name if self.member else ""
