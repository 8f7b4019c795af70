"""Create / update / soft-delete / restore / status transitions.

``LifecycleService`` runs the same sequence for every resource: validate
the payload, run the explicit pre-write stages (``prepare``), write inside
one transaction and record the outcome on the audit logger. Resource
services override the stages and, for composite records, the member hooks.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from sqlalchemy.orm import Session

from shopcart.core.errors import ConflictError, NotFoundError, StateError, ValidationFailure
from shopcart.core.slug import slugify
from shopcart.repositories.base import SoftDeleteRepository, atomic
from shopcart.schemas.common import Pagination
from shopcart.services.audit_service import audited
from shopcart.services.query_builder import ListParams, ResourceQuery, applied_filters, run_list_query
from shopcart.validation.rules import RuleSet, validate

logger = logging.getLogger(__name__)


@dataclass
class Page:
    rows: List[Any]
    pagination: Pagination
    filters: Dict[str, Any]
    options: Dict[str, Any]


class LifecycleService:
    """Base class; subclasses set the class attributes below."""

    resource: str = ""
    label: str = ""
    model: Any = None
    rules: RuleSet = None
    listing: ResourceQuery = None

    def __init__(self, db: Session, actor: Optional[str] = None):
        self.db = db
        self.actor = actor
        self.repo = SoftDeleteRepository(
            db, self.model, *self.scope(), not_found_message=f"{self.label} not found"
        )

    def scope(self) -> Tuple[Any, ...]:
        """Extra criteria restricting which rows belong to this resource."""
        return ()

    # -- stages overridden by resource services -------------------------------

    def prepare(self, values: Dict[str, Any], entity: Optional[Any]) -> Dict[str, Any]:
        """Pre-write stage. ``entity`` is None on create."""
        return values

    def insert(self, values: Dict[str, Any]) -> Any:
        return self.repo.create(values)

    def apply(self, entity: Any, values: Dict[str, Any]) -> Any:
        return self.repo.update(entity, values)

    def delete_members(self, entity: Any) -> bool:
        return self.repo.soft_delete(entity)

    def restore_members(self, entity: Any) -> None:
        self.repo.restore(entity)

    # -- reads -----------------------------------------------------------------

    def get(self, entity_id: int, query: Mapping[str, Any]) -> Tuple[Any, Dict[str, Any]]:
        options = validate(self.rules, "detail", query, self.db)
        entity = self.repo.get(entity_id, include_deleted=options.get("include_deleted", False))
        if self.listing.hides_inactive and not options.get("include_inactive") and not entity.is_active:
            raise NotFoundError(self.repo.not_found_message)
        return entity, options

    def list(self, query: Mapping[str, Any], page_url: Optional[Callable[[int, int], str]] = None) -> Page:
        options = validate(self.rules, "list", query, self.db)
        params = ListParams.from_cleaned(options)
        rows, pagination = run_list_query(self.db, self.listing, params, page_url)
        return Page(rows=rows, pagination=pagination, filters=applied_filters(params), options=options)

    # -- mutations -------------------------------------------------------------

    def create(self, payload: Mapping[str, Any]) -> Any:
        with audited("create", self.resource, actor=self.actor) as record:
            values = validate(self.rules, "create", payload, self.db)
            with atomic(self.db):
                entity = self.insert(self.prepare(values, None))
            record.resource_id = entity.id
        return entity

    def update(self, entity_id: int, payload: Mapping[str, Any]) -> Any:
        with audited("update", self.resource, entity_id, self.actor):
            entity = self.repo.get(entity_id)
            values = validate(self.rules, "update", payload, self.db, target_id=entity_id)
            with atomic(self.db):
                self.apply(entity, self.prepare(values, entity))
        return entity

    def delete(self, entity_id: int) -> bool:
        """Soft delete. Deleting an already deleted record succeeds and keeps
        its original ``deleted_at``; the return value says whether anything
        changed."""
        with audited("delete", self.resource, entity_id, self.actor):
            entity = self.repo.get(entity_id, include_deleted=True)
            with atomic(self.db):
                changed = self.delete_members(entity)
        if not changed:
            logger.info("%s %s was already deleted", self.resource, entity_id)
        return changed

    def restore(self, entity_id: int) -> Any:
        with audited("restore", self.resource, entity_id, self.actor):
            entity = self.repo.get(entity_id, include_deleted=True)
            if entity.deleted_at is None:
                raise StateError(f"{self.label} is not deleted")
            with atomic(self.db):
                self.restore_members(entity)
        return entity

    def set_status(self, entity_id: int, payload: Mapping[str, Any]) -> Any:
        with audited("status", self.resource, entity_id, self.actor):
            entity = self.repo.get(entity_id)
            values = validate(self.rules, "status", payload, self.db)
            with atomic(self.db):
                self.repo.update(entity, {"is_active": values["is_active"]})
        return entity


class SluggedService(LifecycleService):
    """Resources whose slug is derived from the name when none is supplied."""

    slug_conflict_message = "Slug already exists"

    def derive_slug(self, values: Dict[str, Any], entity: Optional[Any]) -> Dict[str, Any]:
        if "slug" in values or "name" not in values:
            return values
        slug = slugify(values["name"])
        if not slug:
            raise ValidationFailure(errors=[("slug", "Slug cannot be derived from name")])
        if entity is not None and entity.slug == slug:
            return values
        taken = self.db.query(self.model.id).filter(self.model.slug == slug)
        if entity is not None:
            taken = taken.filter(self.model.id != entity.id)
        if taken.first() is not None:
            raise ConflictError(errors=[("slug", self.slug_conflict_message)])
        values["slug"] = slug
        return values

    def prepare(self, values: Dict[str, Any], entity: Optional[Any]) -> Dict[str, Any]:
        return self.derive_slug(dict(values), entity)
