"""Diner service: company-scoped diners, tags, images and subscriptions."""

from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.db import crud
from app.errors import (
    AlreadySubscribedDinerError, DinerImageNotFoundError, DinerMaxImageCountExceedError,
    DinerNotFoundError, DinerSubscriptionNotFoundError, DuplicateDinerTagError,
    ImageDeleteFailError, ImageUploadFailError, ImageWithNoExtensionError,
)
from app.models import Company, Diner, DinerImage
from app.schemas import DinerDetail, DinerImageRead, DinerListItem, DinerSort
from app.services import image_store
from app.services.auth import AuthContext
from app.services.companies import get_member_company
from app.services.location import distance_m

logger = logging.getLogger(__name__)

_settings = get_settings()

# gap between consecutive image orders
IMAGE_ORDER_STEP = 100

_SORT_KEYS = {
    DinerSort.DINER_NAME_ASC: (lambda item: (item.name, item.id), False),
    DinerSort.DINER_NAME_DESC: (lambda item: (item.name, item.id), True),
    DinerSort.DISTANCE_ASC: (lambda item: (item.distance, item.name), False),
    DinerSort.DISTANCE_DESC: (lambda item: (item.distance, item.name), True),
    DinerSort.COMMENTS_COUNT_ASC: (lambda item: (item.comment_count, item.name), False),
    DinerSort.COMMENTS_COUNT_DESC: (lambda item: (item.comment_count, item.name), True),
}


def _list_item(diner: Diner, company: Company, comment_count: int) -> DinerListItem:
    return DinerListItem(
        id=diner.id,
        name=diner.name,
        link=diner.link,
        tags=list(diner.tags or []),
        distance=round(distance_m(company.latitude, company.longitude, diner.latitude, diner.longitude), 1),
        comment_count=comment_count,
    )


def image_read(img: DinerImage) -> DinerImageRead:
    return DinerImageRead(
        id=img.id,
        orders=img.orders,
        url=image_store.public_url(img.link),
        thumbnail_url=image_store.public_url(img.thumbnail_link),
    )


async def get_company_diner(db: AsyncSession, auth: AuthContext, diner_id: str) -> Diner:
    """Load a diner of the member's company; other companies' diners look missing."""
    company = await get_member_company(db, auth)
    diner = await crud.get_diner(db, diner_id)
    if not diner or diner.company_id != company.id:
        raise DinerNotFoundError(diner_id)
    return diner


async def create_diner(
    db: AsyncSession, auth: AuthContext, name: str, link: str,
    latitude: float, longitude: float, tags: list[str],
) -> Diner:
    company = await get_member_company(db, auth)
    return await crud.create_diner(db, company.id, name, link, latitude, longitude, tags)


async def get_diner_list(
    db: AsyncSession, auth: AuthContext, page: int, size: int,
    keyword: str | None = None, sort: DinerSort = DinerSort.DINER_NAME_ASC,
) -> tuple[list[DinerListItem], int]:
    company = await get_member_company(db, auth)
    rows = await crud.list_diners_with_comment_count(db, company.id, keyword)
    items = [_list_item(diner, company, count) for diner, count in rows]

    key, reverse = _SORT_KEYS[sort]
    items.sort(key=key, reverse=reverse)
    start = page * size
    return items[start:start + size], len(items)


async def get_diner_detail(db: AsyncSession, auth: AuthContext, diner_id: str) -> DinerDetail:
    diner = await get_company_diner(db, auth, diner_id)
    company = await get_member_company(db, auth)
    count = await crud.count_comments_for_diner(db, diner.id)
    images = await crud.list_images_for_diner(db, diner.id)
    subscription = await crud.get_subscription(db, diner.id, auth.member_id)

    item = _list_item(diner, company, count)
    return DinerDetail(
        **item.model_dump(),
        latitude=diner.latitude,
        longitude=diner.longitude,
        images=[image_read(img) for img in images],
        subscribed=subscription is not None,
    )


async def update_diner(
    db: AsyncSession, auth: AuthContext, diner_id: str,
    link: str | None = None, latitude: float | None = None, longitude: float | None = None,
) -> Diner:
    diner = await get_company_diner(db, auth, diner_id)
    return await crud.update_diner(db, diner, link=link, latitude=latitude, longitude=longitude)


async def remove_diner(db: AsyncSession, auth: AuthContext, diner_id: str) -> None:
    """Delete the diner row first, then its stored objects.

    Object removal failures are logged and leave orphaned keys in the bucket,
    never rows pointing at missing objects.
    """
    diner = await get_company_diner(db, auth, diner_id)
    images = await crud.list_images_for_diner(db, diner.id)
    keys = [key for img in images for key in (img.link, img.thumbnail_link)]
    await crud.delete_diner(db, diner)

    try:
        await image_store.remove_objects(*keys)
    except image_store.StorageError:
        logger.exception("Removing objects of deleted diner %s failed", diner_id)
    logger.info("Diner %s removed with %d images", diner_id, len(images))


# ── Tags ──────────────────────────────────────────────────

async def add_diner_tags(db: AsyncSession, auth: AuthContext, diner_id: str, tags: list[str]) -> Diner:
    diner = await get_company_diner(db, auth, diner_id)
    for tag in tags:
        if tag in (diner.tags or []):
            raise DuplicateDinerTagError(tag)
        diner.add_tag(tag)
    return await crud.save_diner(db, diner)


async def remove_diner_tags(db: AsyncSession, auth: AuthContext, diner_id: str, tags: list[str]) -> Diner:
    diner = await get_company_diner(db, auth, diner_id)
    for tag in tags:
        diner.remove_tag(tag)
    return await crud.save_diner(db, diner)


# ── Images ────────────────────────────────────────────────

async def add_diner_image(
    db: AsyncSession, auth: AuthContext, diner_id: str, filename: str | None, data: bytes,
) -> DinerImage:
    diner = await get_company_diner(db, auth, diner_id)

    count = await crud.count_images_for_diner(db, diner.id)
    if count >= _settings.s3.diner_max_image_count:
        raise DinerMaxImageCountExceedError()

    ext = image_store.get_extension(filename)
    if not ext:
        raise ImageWithNoExtensionError()

    try:
        key, thumb_key = await image_store.upload_diner_image(data, diner.id, ext)
    except image_store.StorageError:
        logger.exception("Upload of %s for diner %s failed", filename, diner.id)
        raise ImageUploadFailError(filename or "")

    max_order = await crud.get_max_image_order(db, diner.id)
    orders = (max_order or 0) + IMAGE_ORDER_STEP
    return await crud.create_diner_image(db, diner.id, key, thumb_key, orders)


async def _remove_image_objects(img: DinerImage) -> None:
    try:
        await image_store.remove_objects(img.link, img.thumbnail_link)
    except image_store.StorageError:
        logger.exception("Removing objects of diner image %s failed", img.id)
        raise ImageDeleteFailError(img.link)


async def remove_diner_image(db: AsyncSession, auth: AuthContext, image_id: str) -> None:
    company = await get_member_company(db, auth)
    img = await crud.get_diner_image(db, image_id)
    if not img:
        raise DinerImageNotFoundError(image_id)
    diner = await crud.get_diner(db, img.diner_id)
    if not diner or diner.company_id != company.id:
        raise DinerImageNotFoundError(image_id)

    await _remove_image_objects(img)
    await crud.delete_diner_image(db, img)


# ── Subscriptions ─────────────────────────────────────────

async def subscribe_diner(db: AsyncSession, auth: AuthContext, diner_id: str) -> None:
    diner = await get_company_diner(db, auth, diner_id)
    if await crud.get_subscription(db, diner.id, auth.member_id):
        raise AlreadySubscribedDinerError()
    await crud.create_subscription(db, diner.id, auth.member_id)


async def unsubscribe_diner(db: AsyncSession, auth: AuthContext, diner_id: str) -> None:
    diner = await get_company_diner(db, auth, diner_id)
    sub = await crud.get_subscription(db, diner.id, auth.member_id)
    if not sub:
        raise DinerSubscriptionNotFoundError()
    await crud.delete_subscription(db, sub)
