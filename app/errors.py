"""Domain errors and their HTTP mapping.

Every error carries a fixed numeric code so clients can branch on it:
1xxx member, 2xxx company, 3xxx diner, 4xxx comment, 5xxx reply.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base exception for domain errors."""

    code: int = 0
    status_code: int = status.HTTP_400_BAD_REQUEST
    default_message: str = "Bad request"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


# ── Member ────────────────────────────────────────────────

class AlreadyExistMemberError(AppError):
    code = 1001
    default_message = "Member with this email already exists"


class IncorrectPasswordError(AppError):
    code = 1002
    default_message = "Incorrect password"


class VerificationCodeNotFoundError(AppError):
    code = 1003
    default_message = "Verification code is invalid or expired"


class MemberNotExistError(NotFoundError):
    code = 1004
    default_message = "Member does not exist"


class MemberUnauthorizedError(AppError):
    code = 1005
    default_message = "Not allowed to access this member"


# ── Company ───────────────────────────────────────────────

class CompanyNotFoundError(NotFoundError):
    code = 2001
    default_message = "Company not found"


class CompanyDomainNotMatchError(AppError):
    code = 2002
    default_message = "Email domain does not match the company domain"


class AlreadyExistCompanyError(AppError):
    code = 2003
    default_message = "Company with this domain already exists"


class CompanyNotChosenError(AppError):
    code = 2004
    default_message = "Choose a company first"


# ── Diner ─────────────────────────────────────────────────

class DinerNotFoundError(NotFoundError):
    code = 3000

    def __init__(self, diner_id: str):
        super().__init__(f"Diner not found: {diner_id}")


class DinerMaxImageCountExceedError(AppError):
    code = 3001
    default_message = "Diner already has the maximum number of images"


class DuplicateDinerTagError(AppError):
    code = 3002

    def __init__(self, tag: str):
        super().__init__(f"Tag already exists: {tag}")


class ImageWithNoExtensionError(AppError):
    code = 3003
    default_message = "Image file has no extension"


class DinerImageNotFoundError(NotFoundError):
    code = 3004

    def __init__(self, image_id: str):
        super().__init__(f"Diner image not found: {image_id}")


class ImageUploadFailError(AppError):
    code = 3005

    def __init__(self, filename: str):
        super().__init__(f"Image upload failed: {filename}")


class ImageDeleteFailError(AppError):
    code = 3006

    def __init__(self, key: str):
        super().__init__(f"Image delete failed: {key}")


class AlreadySubscribedDinerError(AppError):
    code = 3007
    default_message = "Already subscribed to this diner"


class DinerSubscriptionNotFoundError(NotFoundError):
    code = 3008
    default_message = "Not subscribed to this diner"


# ── Comment / Reply ───────────────────────────────────────

class CommentNotFoundError(NotFoundError):
    code = 4001
    default_message = "Comment not found"


class ReplyNotFoundError(NotFoundError):
    code = 5001
    default_message = "Reply not found"


def _error_body(code: int, message: str, type_: str, details=None) -> dict:
    error = {"code": code, "message": message, "type": type_}
    if details is not None:
        error["details"] = details
    return {"error": error}


def setup_error_handlers(app: FastAPI) -> None:
    """Register handlers that render errors in the common envelope."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        logger.info(
            "%s %s -> %s (%d): %s",
            request.method, request.url.path, exc.__class__.__name__, exc.code, exc.message,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.code, exc.message, exc.__class__.__name__),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.warning("Validation error on %s: %s", request.url.path, exc)
        errors = [
            {
                "loc": list(error.get("loc", [])),
                "msg": str(error.get("msg", "")),
                "type": error.get("type", ""),
            }
            for error in exc.errors()
        ]
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=_error_body(0, "Request validation failed", "ValidationError", errors),
        )
