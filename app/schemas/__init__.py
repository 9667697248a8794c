"""Pydantic request/response schemas."""

from app.schemas.common import Page
from app.schemas.member import (
    SignUpRequest, SignInRequest, SignInResponse, VerifyCodeRequest,
    MemberRead, MemberUpdate, PasswordChangeRequest, WithdrawRequest, ChooseCompanyRequest,
)
from app.schemas.company import CompanyCreate, CompanyRead
from app.schemas.diner import (
    DinerSort, DinerCreate, DinerUpdate, DinerTagsRequest, DinerRead,
    DinerListItem, DinerImageRead, DinerDetail,
)
from app.schemas.comment import ShareStatus, CommentsSort, CommentCreate, CommentUpdate, CommentRead
from app.schemas.reply import ReplyCreate, ReplyUpdate, ReplyRead

__all__ = [
    "Page",
    "SignUpRequest", "SignInRequest", "SignInResponse", "VerifyCodeRequest",
    "MemberRead", "MemberUpdate", "PasswordChangeRequest", "WithdrawRequest", "ChooseCompanyRequest",
    "CompanyCreate", "CompanyRead",
    "DinerSort", "DinerCreate", "DinerUpdate", "DinerTagsRequest", "DinerRead",
    "DinerListItem", "DinerImageRead", "DinerDetail",
    "ShareStatus", "CommentsSort", "CommentCreate", "CommentUpdate", "CommentRead",
    "ReplyCreate", "ReplyUpdate", "ReplyRead",
]
