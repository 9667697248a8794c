"""Company service: registration, lookup by email domain, membership."""

from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.db import crud
from app.errors import (
    AlreadyExistCompanyError, CompanyDomainNotMatchError, CompanyNotChosenError,
    CompanyNotFoundError,
)
from app.models import Company, Member
from app.services.auth import AuthContext
from app.services.members import get_own_member

logger = logging.getLogger(__name__)


def email_domain(email: str) -> str:
    return email.rsplit("@", 1)[-1].lower()


async def create_company(
    db: AsyncSession, auth: AuthContext, name: str, address: str,
    latitude: float, longitude: float, domain: str,
) -> Company:
    if email_domain(auth.email) != domain:
        raise CompanyDomainNotMatchError()
    if await crud.get_company_by_domain(db, domain):
        raise AlreadyExistCompanyError()
    company = await crud.create_company(db, name, address, latitude, longitude, domain)
    logger.info("Company %s registered for domain %s", company.id, domain)
    return company


async def get_company_list(
    db: AsyncSession, auth: AuthContext, page: int, size: int,
) -> tuple[list[Company], int]:
    return await crud.list_companies_by_domain(
        db, email_domain(auth.email), offset=page * size, limit=size
    )


async def choose_company(db: AsyncSession, auth: AuthContext, member_id: str, company_id: str) -> Member:
    member = await get_own_member(db, auth, member_id)
    company = await crud.get_company(db, company_id)
    if not company:
        raise CompanyNotFoundError()
    if member.email_domain != company.domain:
        raise CompanyDomainNotMatchError()
    return await crud.update_member(db, member, company_id=company.id)


async def get_member_company(db: AsyncSession, auth: AuthContext) -> Company:
    """The company the authenticated member belongs to."""
    if not auth.company_id:
        raise CompanyNotChosenError()
    company = await crud.get_company(db, auth.company_id)
    if not company:
        raise CompanyNotChosenError()
    return company
