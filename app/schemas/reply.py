from __future__ import annotations
from datetime import datetime
from pydantic import BaseModel, Field


class ReplyCreate(BaseModel):
    content: str = Field(min_length=1, max_length=1000)


class ReplyUpdate(BaseModel):
    content: str = Field(min_length=1, max_length=1000)


class ReplyRead(BaseModel):
    id: str
    comment_id: str
    member_id: str
    member_name: str
    content: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
