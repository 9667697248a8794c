from __future__ import annotations

from fastapi import APIRouter, Depends, File, Query, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.engine import get_db
from app.dependencies import require_auth, require_role
from app.models import ROLE_EDITOR
from app.schemas import (
    DinerCreate, DinerDetail, DinerImageRead, DinerListItem, DinerRead,
    DinerSort, DinerTagsRequest, DinerUpdate, Page,
)
from app.services import diners
from app.services.auth import AuthContext

router = APIRouter(prefix="/diners", tags=["diners"])

_editor_dep = require_role(ROLE_EDITOR)


@router.post("", response_model=DinerRead, status_code=201)
async def create_diner(
    body: DinerCreate,
    auth: AuthContext = Depends(_editor_dep),
    db: AsyncSession = Depends(get_db),
):
    """Register a diner for the member's company with optional tags."""
    return await diners.create_diner(
        db, auth, body.name, body.link, body.latitude, body.longitude, body.tags
    )


@router.get("", response_model=Page[DinerListItem])
async def get_diner_list(
    page: int = Query(default=0, ge=0),
    size: int = Query(default=10, ge=1, le=100),
    keyword: str | None = Query(default=None),
    sort: DinerSort = Query(default=DinerSort.DINER_NAME_ASC),
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    """Diners with distance from the company and comment count."""
    items, total = await diners.get_diner_list(db, auth, page, size, keyword, sort)
    return Page[DinerListItem].of(items, total, page, size)


@router.get("/{diner_id}", response_model=DinerDetail)
async def get_diner_detail(
    diner_id: str,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    return await diners.get_diner_detail(db, auth, diner_id)


@router.put("/{diner_id}", response_model=DinerRead)
async def update_diner(
    diner_id: str,
    body: DinerUpdate,
    auth: AuthContext = Depends(_editor_dep),
    db: AsyncSession = Depends(get_db),
):
    return await diners.update_diner(db, auth, diner_id, body.link, body.latitude, body.longitude)


@router.delete("/{diner_id}")
async def remove_diner(
    diner_id: str,
    auth: AuthContext = Depends(_editor_dep),
    db: AsyncSession = Depends(get_db),
):
    await diners.remove_diner(db, auth, diner_id)
    return {"ok": True}


# ── Tags ──────────────────────────────────────────────────

@router.put(
    "/{diner_id}/tags",
    response_model=DinerRead,
    responses={400: {"description": "errorCode: 3002 - duplicate tag"}},
)
async def add_diner_tags(
    diner_id: str,
    body: DinerTagsRequest,
    auth: AuthContext = Depends(_editor_dep),
    db: AsyncSession = Depends(get_db),
):
    return await diners.add_diner_tags(db, auth, diner_id, body.tags)


@router.delete("/{diner_id}/tags", response_model=DinerRead)
async def remove_diner_tags(
    diner_id: str,
    body: DinerTagsRequest,
    auth: AuthContext = Depends(_editor_dep),
    db: AsyncSession = Depends(get_db),
):
    return await diners.remove_diner_tags(db, auth, diner_id, body.tags)


# ── Images ────────────────────────────────────────────────

@router.post(
    "/{diner_id}/images",
    response_model=DinerImageRead,
    status_code=201,
    responses={400: {"description": "errorCode: 3001 - too many images<br>errorCode: 3003 - no file extension"}},
)
async def add_diner_image(
    diner_id: str,
    image: UploadFile = File(...),
    auth: AuthContext = Depends(_editor_dep),
    db: AsyncSession = Depends(get_db),
):
    data = await image.read()
    img = await diners.add_diner_image(db, auth, diner_id, image.filename, data)
    return diners.image_read(img)


@router.delete("/images/{image_id}")
async def remove_diner_image(
    image_id: str,
    auth: AuthContext = Depends(_editor_dep),
    db: AsyncSession = Depends(get_db),
):
    await diners.remove_diner_image(db, auth, image_id)
    return {"ok": True}


# ── Subscriptions ─────────────────────────────────────────

@router.post("/{diner_id}/subscribe")
async def subscribe_diner(
    diner_id: str,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    await diners.subscribe_diner(db, auth, diner_id)
    return {"ok": True, "subscribed": True}


@router.post("/{diner_id}/unsubscribe")
async def unsubscribe_diner(
    diner_id: str,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    await diners.unsubscribe_diner(db, auth, diner_id)
    return {"ok": True, "subscribed": False}
