"""Product schemas."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from shopcart.models.product import UnitType
from shopcart.schemas.category import CategorySummary
from shopcart.schemas.common import APIModel


class ProductResponse(APIModel):
    id: int
    category_id: int
    name: str
    slug: str
    description: str
    short_description: Optional[str] = None
    price: Decimal
    quantity: Decimal
    unit_type: UnitType
    min_quantity: Optional[Decimal] = None
    max_quantity: Optional[Decimal] = None
    manufacture_date: Optional[date] = None
    expiry_date: Optional[date] = None
    barcode: Optional[str] = None
    in_stock: bool
    low_stock_threshold: Optional[Decimal] = None
    weight: Optional[Decimal] = None
    dimensions: Optional[str] = None
    brand: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime
    deleted_at: Optional[datetime] = None
    category: Optional[CategorySummary] = None
