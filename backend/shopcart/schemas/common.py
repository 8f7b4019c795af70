"""Base schema and the pagination block shared by list responses."""

from typing import Optional

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class APIModel(BaseModel):
    """Read model built from ORM objects and serialized with camelCase keys."""

    model_config = {
        "from_attributes": True,
        "alias_generator": to_camel,
        "populate_by_name": True,
    }


class Pagination(APIModel):
    current_page: int
    total_pages: int
    total_items: int
    items_per_page: int
    has_next: bool
    has_prev: bool
    next_page_url: Optional[str] = None
    prev_page_url: Optional[str] = None

    @classmethod
    def create(
        cls,
        page: int,
        limit: int,
        total: int,
        next_page_url: Optional[str] = None,
        prev_page_url: Optional[str] = None,
    ) -> "Pagination":
        total_pages = -(-total // limit)
        return cls(
            current_page=page,
            total_pages=total_pages,
            total_items=total,
            items_per_page=limit,
            has_next=page < total_pages,
            has_prev=page > 1,
            next_page_url=next_page_url,
            prev_page_url=prev_page_url,
        )
