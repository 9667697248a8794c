"""FastAPI application entry point."""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager, suppress

from fastapi import FastAPI

from app.api.router import api_router
from app.config import DEFAULT_JWT_SECRET, get_settings
from app.db.engine import async_session_factory, create_all
from app.errors import setup_error_handlers
from app.middleware import RequestLoggingMiddleware

_settings = get_settings()

logging.basicConfig(
    level=_settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


async def _verification_cleanup_loop():
    """Background task: delete expired verification codes."""
    from app.services.members import clear_unused_verification_codes

    interval = _settings.verification.cleanup_interval_seconds
    while True:
        try:
            async with async_session_factory() as db:
                await clear_unused_verification_codes(db)
        except Exception:
            logger.exception("Verification code cleanup failed")
        await asyncio.sleep(interval)


def _warn_on_default_secret(settings) -> bool:
    if settings.jwt.secret_key == DEFAULT_JWT_SECRET:
        logger.warning("JWT_SECRET_KEY is not set; tokens are signed with the built-in default secret")
        return True
    return False


@asynccontextmanager
async def lifespan(app: FastAPI):
    _warn_on_default_secret(_settings)
    await create_all()

    cleanup_task = asyncio.create_task(_verification_cleanup_loop())
    logger.info("Our Company Lunch API started")
    yield
    cleanup_task.cancel()
    with suppress(asyncio.CancelledError):
        await cleanup_task
    logger.info("Our Company Lunch API stopped")


app = FastAPI(
    title="Our Company Lunch",
    description="Record lunch comments on diners and share them within your company.",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(RequestLoggingMiddleware)
setup_error_handlers(app)

app.include_router(api_router)


@app.get("/health")
async def health():
    return {"status": "ok"}
