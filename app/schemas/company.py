from __future__ import annotations
from datetime import datetime
from pydantic import BaseModel, Field, field_validator


class CompanyCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    address: str = ""
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    domain: str = Field(min_length=3, max_length=255)

    @field_validator("domain")
    @classmethod
    def _lower_domain(cls, v: str) -> str:
        return v.strip().lower().lstrip("@")


class CompanyRead(BaseModel):
    id: str
    name: str
    address: str
    latitude: float
    longitude: float
    domain: str
    created_at: datetime

    model_config = {"from_attributes": True}
