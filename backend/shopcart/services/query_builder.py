"""List query construction shared by every resource.

Turns validated list parameters into one filtered query, then runs an
unbounded count and a bounded page query against the same predicate.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from pydantic.alias_generators import to_camel
from sqlalchemy import or_
from sqlalchemy.orm import Query, Session

from shopcart.core.config import settings
from shopcart.core.errors import ValidationFailure
from shopcart.schemas.common import Pagination

logger = logging.getLogger(__name__)

SORT_DIRECTIONS = ("ASC", "DESC")

# Keys of a cleaned list payload that are not resource filters
_BASE_KEYS = {
    "page", "limit", "search", "sort_by", "sort_order",
    "is_active", "include_inactive", "include_deleted",
}


@dataclass
class ListParams:
    """Parsed list query: paging, search, visibility, sorting and filters."""

    page: int = 1
    limit: int = settings.default_page_size
    search: Optional[str] = None
    sort_by: Optional[str] = None
    sort_order: Optional[str] = None
    is_active: Optional[bool] = None
    include_inactive: bool = False
    include_deleted: bool = False
    filters: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_cleaned(cls, cleaned: Mapping[str, Any]) -> "ListParams":
        params = cls(
            filters={k: v for k, v in cleaned.items() if k not in _BASE_KEYS and v is not None}
        )
        for key in _BASE_KEYS:
            if cleaned.get(key) is not None:
                setattr(params, key, cleaned[key])
        if params.search == "":
            params.search = None
        return params

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


FilterFn = Callable[[Query, Any], Query]


@dataclass(frozen=True)
class ResourceQuery:
    """How one resource is searched, filtered and sorted.

    ``sort_columns`` maps the API sort names to columns and doubles as the
    sort allow-list. ``hides_inactive`` makes rows with ``is_active=False``
    invisible unless ``includeInactive`` or an explicit ``isActive`` is given.
    """

    model: Any
    search_columns: Tuple[Any, ...]
    sort_columns: Mapping[str, Any]
    default_sort: Tuple[str, str]
    filters: Mapping[str, FilterFn] = field(default_factory=dict)
    hides_inactive: bool = True
    base_query: Optional[Callable[[Session], Query]] = None

    def start(self, db: Session) -> Query:
        if self.base_query is not None:
            return self.base_query(db)
        return db.query(self.model)


def apply_visibility(query: Query, resource: ResourceQuery, params: ListParams) -> Query:
    model = resource.model
    if params.is_active is not None:
        query = query.filter(model.is_active.is_(params.is_active))
    elif resource.hides_inactive and not params.include_inactive:
        query = query.filter(model.is_active.is_(True))
    if not params.include_deleted:
        query = query.filter(model.not_deleted())
    return query


def apply_search(query: Query, resource: ResourceQuery, term: Optional[str]) -> Query:
    if not term:
        return query
    return query.filter(
        or_(*(column.icontains(term, autoescape=True) for column in resource.search_columns))
    )


def apply_filters(query: Query, resource: ResourceQuery, filters: Mapping[str, Any]) -> Query:
    for key, value in filters.items():
        apply = resource.filters.get(key)
        if apply is not None:
            query = apply(query, value)
    return query


def apply_sort(query: Query, resource: ResourceQuery, params: ListParams) -> Query:
    sort_by = params.sort_by or resource.default_sort[0]
    sort_order = (params.sort_order or resource.default_sort[1]).upper()
    # Rules already restrict these; never hand an unknown name to order_by
    if sort_by not in resource.sort_columns:
        raise ValidationFailure(errors=[("sortBy", "Invalid sort field")])
    if sort_order not in SORT_DIRECTIONS:
        raise ValidationFailure(errors=[("sortOrder", "Sort order must be ASC or DESC")])

    column = resource.sort_columns[sort_by]
    primary = column.desc() if sort_order == "DESC" else column.asc()
    return query.order_by(primary, resource.model.id.asc())


def build_query(db: Session, resource: ResourceQuery, params: ListParams) -> Query:
    """Filtered (but unsorted and unbounded) query for ``params``."""
    query = resource.start(db)
    query = apply_visibility(query, resource, params)
    query = apply_search(query, resource, params.search)
    return apply_filters(query, resource, params.filters)


def run_list_query(
    db: Session,
    resource: ResourceQuery,
    params: ListParams,
    page_url: Optional[Callable[[int, int], str]] = None,
) -> Tuple[List[Any], Pagination]:
    """Return one page of rows plus its pagination block.

    ``page_url(page, limit)`` builds a navigation link; links are null at
    the boundaries.
    """
    query = build_query(db, resource, params)
    total = query.order_by(None).count()
    rows = apply_sort(query, resource, params).offset(params.offset).limit(params.limit).all()

    pagination = Pagination.create(page=params.page, limit=params.limit, total=total)
    if page_url is not None:
        if pagination.has_next:
            pagination.next_page_url = page_url(params.page + 1, params.limit)
        if pagination.has_prev:
            pagination.prev_page_url = page_url(params.page - 1, params.limit)

    logger.debug(
        "List %s page=%s limit=%s total=%s",
        resource.model.__tablename__, params.page, params.limit, total,
    )
    return rows, pagination


def applied_filters(params: ListParams) -> Dict[str, Any]:
    """Echo of the search and filter values, keyed by their API names."""
    echo: Dict[str, Any] = {
        "search": params.search,
        "isActive": params.is_active,
        "includeInactive": params.include_inactive,
        "includeDeleted": params.include_deleted,
    }
    for key, value in params.filters.items():
        echo[to_camel(key)] = str(value) if not isinstance(value, (bool, int, str)) else value
    return echo
