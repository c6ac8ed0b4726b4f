"""Shared sorting and paging helpers for repository queries."""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass

from sqlalchemy import asc, desc
from sqlalchemy.orm import Query

from app.core.database import Base


def apply_order_by(
    query: Query,  # type: ignore[type-arg]
    model: type[Base],
    sort_by: str | None,
    sort_order: str | None = None,
    allowed: Iterable[str] | None = None,
    default_field: str = "created_at",
) -> Query:  # type: ignore[type-arg]
    """Order ``query`` by a whitelisted column of ``model``.

    Unknown columns fall back to ``default_field``; anything other than "asc"
    sorts descending.
    """
    allowed_fields = set(allowed) if allowed is not None else None
    field = default_field
    if sort_by and hasattr(model, sort_by):
        if allowed_fields is None or sort_by in allowed_fields:
            field = sort_by

    order_func = asc if (sort_order or "").lower() == "asc" else desc
    return query.order_by(order_func(getattr(model, field)), desc(model.id))


@dataclass
class Page:
    """Offset pagination window."""

    page: int = 1
    limit: int = 10

    @property
    def offset(self) -> int:
        return (max(self.page, 1) - 1) * self.limit

    def total_pages(self, total: int) -> int:
        return math.ceil(total / self.limit) if self.limit else 0
