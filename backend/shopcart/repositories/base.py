"""Repository over soft-deletable models.

Services go through this interface instead of touching ``deleted_at`` or
the session directly, so persistence stays out of validation and lifecycle
rules.
"""

from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Generic, Iterator, Mapping, Optional, Type, TypeVar

from sqlalchemy.orm import Query, Session

from shopcart.core.errors import NotFoundError
from shopcart.db.base import Base

ModelT = TypeVar("ModelT", bound=Base)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@contextmanager
def atomic(db: Session) -> Iterator[Session]:
    """Commit everything done inside the block, or nothing at all."""
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise


class SoftDeleteRepository(Generic[ModelT]):
    """find / create / update / soft-delete / restore for one model.

    ``criteria`` are extra filter expressions every lookup is scoped to,
    e.g. ``User.account_type == AccountType.admin``.
    """

    def __init__(
        self,
        db: Session,
        model: Type[ModelT],
        *criteria: Any,
        not_found_message: str = "Resource not found",
    ):
        self.db = db
        self.model = model
        self.criteria = criteria
        self.not_found_message = not_found_message

    def query(self, include_deleted: bool = False) -> Query:
        query = self.db.query(self.model).filter(*self.criteria)
        if not include_deleted:
            query = query.filter(self.model.not_deleted())
        return query

    def find(self, entity_id: int, include_deleted: bool = False) -> Optional[ModelT]:
        return self.query(include_deleted).filter(self.model.id == entity_id).first()

    def get(self, entity_id: int, include_deleted: bool = False) -> ModelT:
        """Like ``find`` but raises ``NotFoundError`` when nothing matches."""
        entity = self.find(entity_id, include_deleted=include_deleted)
        if entity is None:
            raise NotFoundError(self.not_found_message)
        return entity

    def create(self, values: Mapping[str, Any]) -> ModelT:
        entity = self.model(**values)
        self.db.add(entity)
        self.db.flush()
        return entity

    def update(self, entity: ModelT, values: Mapping[str, Any]) -> ModelT:
        for attr, value in values.items():
            setattr(entity, attr, value)
        self.db.flush()
        return entity

    def soft_delete(self, entity: ModelT, when: Optional[datetime] = None) -> bool:
        """Mark ``entity`` deleted. Returns False if it already was."""
        if entity.deleted_at is not None:
            return False
        entity.deleted_at = when or utcnow()
        self.db.flush()
        return True

    def restore(self, entity: ModelT) -> None:
        entity.deleted_at = None
        self.db.flush()
