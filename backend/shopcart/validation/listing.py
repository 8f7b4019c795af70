"""Query-string rules shared by every list and detail endpoint."""

from typing import Tuple

from shopcart.core.config import settings
from shopcart.validation.checks import MAX_INT, IsBool, IsInt, Length, OneOf, Upper
from shopcart.validation.rules import FieldRule

SORT_ORDERS = ("ASC", "DESC")


def visibility_rules() -> Tuple[FieldRule, ...]:
    return (
        FieldRule("isActive", (IsBool("isActive filter must be a boolean"),)),
        FieldRule("includeInactive", (IsBool("includeInactive must be a boolean"),)),
        FieldRule("includeDeleted", (IsBool("includeDeleted must be a boolean"),)),
    )


def list_rules(sort_fields: Tuple[str, ...], *extra: FieldRule) -> Tuple[FieldRule, ...]:
    """page / limit / search / visibility / sort rules plus resource filters."""
    return (
        FieldRule(
            "page",
            # offset = (page - 1) * limit must still fit an INTEGER
            (IsInt("Page must be a positive integer", min=1, max=MAX_INT // settings.max_page_size),),
        ),
        FieldRule(
            "limit",
            (IsInt(f"Limit must be between 1 and {settings.max_page_size}", min=1, max=settings.max_page_size),),
        ),
        FieldRule("search", (Length("Search term must be less than 100 characters", max=100),)),
        *visibility_rules(),
        *extra,
        FieldRule("sortBy", (OneOf("Invalid sort field", choices=sort_fields),)),
        FieldRule(
            "sortOrder",
            (Upper(), OneOf("Sort order must be ASC or DESC", choices=SORT_ORDERS)),
        ),
    )


def detail_rules(*extra: FieldRule) -> Tuple[FieldRule, ...]:
    return (
        FieldRule("includeDeleted", (IsBool("includeDeleted must be a boolean"),)),
        FieldRule("includeInactive", (IsBool("includeInactive must be a boolean"),)),
        *extra,
    )


def status_rules() -> Tuple[FieldRule, ...]:
    return (
        FieldRule(
            "isActive",
            (IsBool("isActive must be a boolean"),),
            required=True,
            required_message="isActive must be a boolean",
        ),
    )
