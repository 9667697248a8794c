"""CRUD operations for the lunch comment models."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import select, func, delete, or_
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import (
    Company, Member, Verification,
    Diner, DinerImage, DinerSubscription,
    Comment, Reply, SHARE_COMPANY,
)


async def _update(db: AsyncSession, obj, **kwargs):
    for k, v in kwargs.items():
        if v is not None:
            setattr(obj, k, v)
    await db.commit()
    await db.refresh(obj)
    return obj


# ── Company ───────────────────────────────────────────────

async def create_company(
    db: AsyncSession, name: str, address: str,
    latitude: float, longitude: float, domain: str,
) -> Company:
    company = Company(
        name=name, address=address,
        latitude=latitude, longitude=longitude, domain=domain,
    )
    db.add(company)
    await db.commit()
    await db.refresh(company)
    return company


async def get_company(db: AsyncSession, company_id: str) -> Company | None:
    return await db.get(Company, company_id)


async def get_company_by_domain(db: AsyncSession, domain: str) -> Company | None:
    result = await db.execute(select(Company).where(Company.domain == domain))
    return result.scalars().first()


async def list_companies_by_domain(
    db: AsyncSession, domain: str, offset: int = 0, limit: int = 10,
) -> tuple[list[Company], int]:
    total = await db.scalar(
        select(func.count()).select_from(Company).where(Company.domain == domain)
    )
    result = await db.execute(
        select(Company)
        .where(Company.domain == domain)
        .order_by(Company.name, Company.id)
        .offset(offset).limit(limit)
    )
    return list(result.scalars().all()), total or 0


# ── Member ────────────────────────────────────────────────

async def create_member(
    db: AsyncSession, email: str, password_hash: str, name: str, role: str,
) -> Member:
    member = Member(email=email, password_hash=password_hash, name=name, role=role)
    db.add(member)
    await db.commit()
    await db.refresh(member)
    return member


async def get_member(db: AsyncSession, member_id: str) -> Member | None:
    return await db.get(Member, member_id)


async def get_member_by_email(db: AsyncSession, email: str) -> Member | None:
    result = await db.execute(select(Member).where(Member.email == email))
    return result.scalars().first()


async def get_member_by_id_and_email(db: AsyncSession, member_id: str, email: str) -> Member | None:
    result = await db.execute(
        select(Member).where(Member.id == member_id, Member.email == email)
    )
    return result.scalars().first()


async def member_exists(db: AsyncSession, email: str) -> bool:
    count = await db.scalar(
        select(func.count()).select_from(Member).where(Member.email == email)
    )
    return bool(count)


async def update_member(db: AsyncSession, member: Member, **kwargs) -> Member:
    return await _update(db, member, **kwargs)


async def delete_member(db: AsyncSession, member: Member) -> None:
    await db.delete(member)
    await db.commit()


# ── Verification ──────────────────────────────────────────

async def get_verification_by_email(db: AsyncSession, email: str) -> Verification | None:
    result = await db.execute(select(Verification).where(Verification.email == email))
    return result.scalars().first()


async def replace_verification(
    db: AsyncSession, email: str, code: str, expiration_at: datetime,
) -> Verification:
    """Drop any previous code for the email and store the new one."""
    await db.execute(delete(Verification).where(Verification.email == email))
    verification = Verification(email=email, code=code, expiration_at=expiration_at)
    db.add(verification)
    await db.commit()
    await db.refresh(verification)
    return verification


async def delete_verification(db: AsyncSession, verification: Verification) -> None:
    await db.delete(verification)
    await db.commit()


async def delete_expired_verifications(db: AsyncSession, now: datetime) -> int:
    result = await db.execute(delete(Verification).where(Verification.expiration_at < now))
    await db.commit()
    return result.rowcount or 0


# ── Diner ─────────────────────────────────────────────────

async def create_diner(
    db: AsyncSession, company_id: str, name: str, link: str,
    latitude: float, longitude: float, tags: list[str] | None = None,
) -> Diner:
    diner = Diner(
        company_id=company_id, name=name, link=link,
        latitude=latitude, longitude=longitude, tags=tags or [],
    )
    db.add(diner)
    await db.commit()
    await db.refresh(diner)
    return diner


async def get_diner(db: AsyncSession, diner_id: str) -> Diner | None:
    return await db.get(Diner, diner_id)


async def list_diners_with_comment_count(
    db: AsyncSession, company_id: str, keyword: str | None = None,
) -> list[tuple[Diner, int]]:
    """All diners of a company, each paired with its comment count."""
    counts = (
        select(Comment.diner_id, func.count(Comment.id).label("comment_count"))
        .group_by(Comment.diner_id)
        .subquery()
    )
    stmt = (
        select(Diner, func.coalesce(counts.c.comment_count, 0))
        .outerjoin(counts, counts.c.diner_id == Diner.id)
        .where(Diner.company_id == company_id)
    )
    if keyword:
        stmt = stmt.where(Diner.name.contains(keyword, autoescape=True))
    result = await db.execute(stmt)
    return [(diner, int(count)) for diner, count in result.all()]


async def count_comments_for_diner(db: AsyncSession, diner_id: str) -> int:
    count = await db.scalar(
        select(func.count()).select_from(Comment).where(Comment.diner_id == diner_id)
    )
    return count or 0


async def update_diner(db: AsyncSession, diner: Diner, **kwargs) -> Diner:
    return await _update(db, diner, **kwargs)


async def save_diner(db: AsyncSession, diner: Diner) -> Diner:
    await db.commit()
    await db.refresh(diner)
    return diner


async def delete_diner(db: AsyncSession, diner: Diner) -> None:
    await db.delete(diner)
    await db.commit()


# ── DinerImage ────────────────────────────────────────────

async def count_images_for_diner(db: AsyncSession, diner_id: str) -> int:
    count = await db.scalar(
        select(func.count()).select_from(DinerImage).where(DinerImage.diner_id == diner_id)
    )
    return count or 0


async def get_max_image_order(db: AsyncSession, diner_id: str) -> int | None:
    return await db.scalar(
        select(func.max(DinerImage.orders)).where(DinerImage.diner_id == diner_id)
    )


async def create_diner_image(
    db: AsyncSession, diner_id: str, link: str, thumbnail_link: str, orders: int,
) -> DinerImage:
    img = DinerImage(diner_id=diner_id, link=link, thumbnail_link=thumbnail_link, orders=orders)
    db.add(img)
    await db.commit()
    await db.refresh(img)
    return img


async def get_diner_image(db: AsyncSession, image_id: str) -> DinerImage | None:
    return await db.get(DinerImage, image_id)


async def list_images_for_diner(db: AsyncSession, diner_id: str) -> list[DinerImage]:
    result = await db.execute(
        select(DinerImage)
        .where(DinerImage.diner_id == diner_id)
        .order_by(DinerImage.orders)
    )
    return list(result.scalars().all())


async def delete_diner_image(db: AsyncSession, img: DinerImage) -> None:
    await db.delete(img)
    await db.commit()


# ── DinerSubscription ─────────────────────────────────────

async def get_subscription(db: AsyncSession, diner_id: str, member_id: str) -> DinerSubscription | None:
    result = await db.execute(
        select(DinerSubscription).where(
            DinerSubscription.diner_id == diner_id,
            DinerSubscription.member_id == member_id,
        )
    )
    return result.scalars().first()


async def create_subscription(db: AsyncSession, diner_id: str, member_id: str) -> DinerSubscription:
    sub = DinerSubscription(diner_id=diner_id, member_id=member_id)
    db.add(sub)
    await db.commit()
    await db.refresh(sub)
    return sub


async def delete_subscription(db: AsyncSession, sub: DinerSubscription) -> None:
    await db.delete(sub)
    await db.commit()


# ── Comment ───────────────────────────────────────────────

async def create_comment(
    db: AsyncSession, diner_id: str, member_id: str, content: str, share_status: str,
) -> Comment:
    comment = Comment(
        diner_id=diner_id, member_id=member_id,
        content=content, share_status=share_status,
    )
    db.add(comment)
    await db.commit()
    await db.refresh(comment)
    return comment


async def get_comment(db: AsyncSession, comment_id: str) -> Comment | None:
    return await db.get(Comment, comment_id)


async def get_comment_by_author_email(db: AsyncSession, comment_id: str, email: str) -> Comment | None:
    result = await db.execute(
        select(Comment)
        .join(Member, Member.id == Comment.member_id)
        .where(Comment.id == comment_id, Member.email == email)
    )
    return result.scalars().first()


async def list_visible_comments(
    db: AsyncSession, diner_id: str, member_id: str,
    commented_by: str | None = None, keyword: str | None = None,
    newest_first: bool = True, offset: int = 0, limit: int = 10,
) -> tuple[list[Comment], int]:
    """Comments shared with the company plus the member's own ones."""
    conditions = [
        Comment.diner_id == diner_id,
        or_(Comment.share_status == SHARE_COMPANY, Comment.member_id == member_id),
    ]
    if commented_by:
        conditions.append(Member.name == commented_by)
    if keyword:
        conditions.append(Comment.content.contains(keyword, autoescape=True))

    base = select(Comment).join(Member, Member.id == Comment.member_id).where(*conditions)
    total = await db.scalar(select(func.count()).select_from(base.subquery()))

    if newest_first:
        order = (Comment.created_at.desc(), Comment.id.desc())
    else:
        order = (Comment.created_at.asc(), Comment.id.asc())
    result = await db.execute(base.order_by(*order).offset(offset).limit(limit))
    return list(result.scalars().all()), total or 0


async def update_comment(db: AsyncSession, comment: Comment, **kwargs) -> Comment:
    return await _update(db, comment, **kwargs)


async def delete_comment(db: AsyncSession, comment: Comment) -> None:
    await db.delete(comment)
    await db.commit()


# ── Reply ─────────────────────────────────────────────────

async def create_reply(db: AsyncSession, comment_id: str, member_id: str, content: str) -> Reply:
    reply = Reply(comment_id=comment_id, member_id=member_id, content=content)
    db.add(reply)
    await db.commit()
    await db.refresh(reply)
    return reply


async def get_reply(db: AsyncSession, reply_id: str) -> Reply | None:
    return await db.get(Reply, reply_id)


async def list_replies(
    db: AsyncSession, comment_id: str, offset: int = 0, limit: int = 10,
) -> tuple[list[Reply], int]:
    total = await db.scalar(
        select(func.count()).select_from(Reply).where(Reply.comment_id == comment_id)
    )
    result = await db.execute(
        select(Reply)
        .where(Reply.comment_id == comment_id)
        .order_by(Reply.created_at.desc(), Reply.id.desc())
        .offset(offset).limit(limit)
    )
    return list(result.scalars().all()), total or 0


async def update_reply(db: AsyncSession, reply: Reply, **kwargs) -> Reply:
    return await _update(db, reply, **kwargs)


async def delete_reply(db: AsyncSession, reply: Reply) -> None:
    await db.delete(reply)
    await db.commit()
