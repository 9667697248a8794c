from __future__ import annotations
from typing import Generic, TypeVar
from pydantic import BaseModel

T = TypeVar("T")


class Page(BaseModel, Generic[T]):
    content: list[T]
    page: int
    size: int
    total_elements: int
    total_pages: int

    @classmethod
    def of(cls, content: list, total: int, page: int, size: int) -> "Page":
        pages = (total + size - 1) // size if size else 0
        return cls(content=content, page=page, size=size, total_elements=total, total_pages=pages)
