from __future__ import annotations
from datetime import datetime
from enum import Enum
from typing import Annotated
from pydantic import AfterValidator, BaseModel, Field


def _unique_tags(tags: list[str]) -> list[str]:
    # keeps first occurrence order
    seen: dict[str, None] = {}
    for tag in tags:
        tag = tag.strip()
        if tag:
            seen.setdefault(tag, None)
    return list(seen)


Tags = Annotated[list[str], AfterValidator(_unique_tags)]


class DinerSort(str, Enum):
    DINER_NAME_ASC = "DINER_NAME_ASC"
    DINER_NAME_DESC = "DINER_NAME_DESC"
    DISTANCE_ASC = "DISTANCE_ASC"
    DISTANCE_DESC = "DISTANCE_DESC"
    COMMENTS_COUNT_ASC = "COMMENTS_COUNT_ASC"
    COMMENTS_COUNT_DESC = "COMMENTS_COUNT_DESC"


class DinerCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    link: str = ""
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    tags: Tags = []


class DinerUpdate(BaseModel):
    link: str | None = None
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)


class DinerTagsRequest(BaseModel):
    tags: Tags = Field(min_length=1)


class DinerRead(BaseModel):
    id: str
    company_id: str
    name: str
    link: str
    latitude: float
    longitude: float
    tags: list[str]
    created_at: datetime

    model_config = {"from_attributes": True}


class DinerListItem(BaseModel):
    id: str
    name: str
    link: str
    tags: list[str]
    distance: float  # metres from the company
    comment_count: int


class DinerImageRead(BaseModel):
    id: str
    orders: int
    url: str
    thumbnail_url: str


class DinerDetail(DinerListItem):
    latitude: float
    longitude: float
    images: list[DinerImageRead] = []
    subscribed: bool = False
