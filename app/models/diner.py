from __future__ import annotations

from sqlalchemy import String, Integer, Float, JSON, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, ULIDMixin, UpdatedAtMixin


class Diner(Base, ULIDMixin, UpdatedAtMixin):
    __tablename__ = "diners"

    company_id: Mapped[str] = mapped_column(
        String(26), ForeignKey("companies.id", ondelete="CASCADE"), index=True
    )
    name: Mapped[str] = mapped_column(String(255))
    link: Mapped[str] = mapped_column(String(500), default="")
    latitude: Mapped[float] = mapped_column(Float)
    longitude: Mapped[float] = mapped_column(Float)
    tags: Mapped[list] = mapped_column(JSON, default=list)

    def add_tag(self, tag: str) -> None:
        # JSON columns only detect reassignment
        self.tags = [*(self.tags or []), tag]

    def remove_tag(self, tag: str) -> None:
        self.tags = [t for t in (self.tags or []) if t != tag]


class DinerImage(Base, ULIDMixin):
    __tablename__ = "diner_images"

    diner_id: Mapped[str] = mapped_column(
        String(26), ForeignKey("diners.id", ondelete="CASCADE"), index=True
    )
    link: Mapped[str] = mapped_column(String(500))
    thumbnail_link: Mapped[str] = mapped_column(String(500), default="")
    orders: Mapped[int] = mapped_column(Integer)


class DinerSubscription(Base, ULIDMixin):
    __tablename__ = "diner_subscriptions"
    __table_args__ = (UniqueConstraint("diner_id", "member_id"),)

    diner_id: Mapped[str] = mapped_column(
        String(26), ForeignKey("diners.id", ondelete="CASCADE"), index=True
    )
    member_id: Mapped[str] = mapped_column(
        String(26), ForeignKey("members.id", ondelete="CASCADE"), index=True
    )
