"""SQLAlchemy declarative base and common utilities."""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class TimestampMixin:
    """Mixin for created_at and updated_at timestamps."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class SoftDeleteMixin:
    """Soft-delete support via a ``deleted_at`` timestamp.

    A row is alive while ``deleted_at`` is NULL. Transitions are performed by
    the repository (``shopcart.repositories.base``), not by the model.
    """

    deleted_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True, default=None, index=True,
    )

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    @classmethod
    def not_deleted(cls):
        """SQLAlchemy filter expression: ``WHERE deleted_at IS NULL``."""
        return cls.deleted_at.is_(None)
