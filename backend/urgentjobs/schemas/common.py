from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class PageMeta(BaseModel):
    total: int
    page: int
    limit: int
    pages: int


class Envelope(BaseModel, Generic[T]):
    success: bool = True
    message: str
    data: T | None = None
    meta: PageMeta | None = None


def ok(message: str, data=None, meta: dict | None = None) -> dict:
    return {"success": True, "message": message, "data": data, "meta": meta}
