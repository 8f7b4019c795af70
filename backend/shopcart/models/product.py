"""Product model."""

from __future__ import annotations

import enum
from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import Boolean, CheckConstraint, Date, Enum, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shopcart.db.base import Base, SoftDeleteMixin, TimestampMixin


class UnitType(str, enum.Enum):
    kg = "kg"
    g = "g"
    lb = "lb"
    oz = "oz"
    piece = "piece"
    pack = "pack"
    bunch = "bunch"
    dozen = "dozen"
    liter = "liter"
    ml = "ml"


class Product(Base, TimestampMixin, SoftDeleteMixin):
    """Product in the catalog."""

    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_products_price_non_negative"),
        CheckConstraint("quantity >= 0", name="ck_products_quantity_non_negative"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    category_id: Mapped[int] = mapped_column(
        ForeignKey("categories.id", ondelete="CASCADE", onupdate="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(200), unique=True, nullable=False, index=True)
    slug: Mapped[str] = mapped_column(String(220), unique=True, nullable=False, index=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    short_description: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    quantity: Mapped[Decimal] = mapped_column(Numeric(10, 3), default=Decimal("0"), nullable=False)
    unit_type: Mapped[UnitType] = mapped_column(
        Enum(UnitType, name="unit_type"), default=UnitType.piece, nullable=False
    )
    min_quantity: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 3), nullable=True)
    max_quantity: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 3), nullable=True)
    manufacture_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    expiry_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    barcode: Mapped[Optional[str]] = mapped_column(String(100), nullable=True, index=True)
    in_stock: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    low_stock_threshold: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(10, 3), default=Decimal("10"), nullable=True
    )
    weight: Mapped[Optional[Decimal]] = mapped_column(Numeric(8, 3), nullable=True)  # kg
    dimensions: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)  # "10x5x3" or "10x5"
    brand: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    category: Mapped["Category"] = relationship("Category", back_populates="products")


from shopcart.models.category import Category  # noqa: E402
