"""Category schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from shopcart.schemas.common import APIModel


class CategorySummary(APIModel):
    """Category fields embedded in product responses."""

    id: int
    name: str
    slug: str


class CategoryResponse(CategorySummary):
    description: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime
    deleted_at: Optional[datetime] = None
