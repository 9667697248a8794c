from __future__ import annotations
from datetime import datetime
from enum import Enum
from pydantic import BaseModel, Field


class ShareStatus(str, Enum):
    ME = "ME"
    COMPANY = "COMPANY"


class CommentsSort(str, Enum):
    CREATED_AT_ASC = "CREATED_AT_ASC"
    CREATED_AT_DESC = "CREATED_AT_DESC"


class CommentCreate(BaseModel):
    content: str = Field(min_length=1, max_length=2000)
    share_status: ShareStatus = ShareStatus.COMPANY


class CommentUpdate(BaseModel):
    content: str = Field(min_length=1, max_length=2000)
    share_status: ShareStatus


class CommentRead(BaseModel):
    id: str
    diner_id: str
    member_id: str
    member_name: str
    content: str
    share_status: ShareStatus
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
