"""Central router that includes all sub-routers."""

from fastapi import APIRouter

from app.api.members import router as members_router
from app.api.companies import router as companies_router
from app.api.diners import router as diners_router
from app.api.comments import router as comments_router
from app.api.replies import router as replies_router

api_router = APIRouter()
api_router.include_router(members_router)
api_router.include_router(companies_router)
api_router.include_router(diners_router)
api_router.include_router(comments_router)
api_router.include_router(replies_router)
