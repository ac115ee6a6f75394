import math
from dataclasses import dataclass

from fastapi import Query

from urgentjobs.config import settings


@dataclass(frozen=True)
class Page:
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def page_params(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
) -> Page:
    return Page(page=page, limit=limit)


def page_meta(total: int, page: Page) -> dict:
    return {
        "total": total,
        "page": page.page,
        "limit": page.limit,
        "pages": math.ceil(total / page.limit),
    }


def paginate(query, page: Page):
    """Return (rows, meta) for a SQLAlchemy ORM query."""
    total = query.order_by(None).count()
    rows = query.offset(page.offset).limit(page.limit).all()
    return rows, page_meta(total, page)
