from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session


@dataclass(frozen=True)
class Page:
    items: list[Any]
    total: int
    page: int
    per_page: int

    @property
    def last_page(self) -> int:
        if self.total == 0:
            return 1
        return (self.total + self.per_page - 1) // self.per_page

    def to_dict(self, data: list[dict]) -> dict:
        """Paginator payload around already serialized items."""
        return {
            "data": data,
            "total": self.total,
            "current_page": self.page,
            "per_page": self.per_page,
            "last_page": self.last_page,
        }


def paginate(db: Session, stmt: Select, *, page: int, per_page: int) -> Page:
    """Run `stmt` for one page of ORM entities plus the total row count."""
    page = max(int(page or 1), 1)

    total = db.scalar(select(func.count()).select_from(stmt.order_by(None).subquery())) or 0
    items = db.scalars(stmt.limit(per_page).offset((page - 1) * per_page)).all()

    return Page(items=list(items), total=int(total), page=page, per_page=per_page)
