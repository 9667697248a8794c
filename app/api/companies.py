from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.engine import get_db
from app.dependencies import require_auth
from app.schemas import CompanyCreate, CompanyRead, Page
from app.services import companies
from app.services.auth import AuthContext

router = APIRouter(prefix="/companies", tags=["companies"])


@router.post("", response_model=CompanyRead, status_code=201)
async def create_company(
    body: CompanyCreate,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    return await companies.create_company(
        db, auth, body.name, body.address, body.latitude, body.longitude, body.domain
    )


@router.get("", response_model=Page[CompanyRead])
async def get_company_list(
    page: int = Query(default=0, ge=0),
    size: int = Query(default=10, ge=1, le=100),
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    """Companies the member can join, i.e. those sharing the member's email domain."""
    items, total = await companies.get_company_list(db, auth, page, size)
    return Page[CompanyRead].of([CompanyRead.model_validate(c) for c in items], total, page, size)
