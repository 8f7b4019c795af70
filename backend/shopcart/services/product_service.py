"""Product lifecycle.

Besides slug derivation, every write re-checks the stock invariants on the
record as it will be stored (submitted values merged over persisted ones),
so a partial update can't leave quantity outside its bounds or the dates
out of order. ``in_stock`` is always recomputed from the merged quantity.
"""

from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.orm import Query, selectinload

from shopcart.core.errors import ValidationFailure
from shopcart.models.product import Product, UnitType
from shopcart.services.lifecycle import SluggedService
from shopcart.services.query_builder import ResourceQuery
from shopcart.validation.product import product_rules

STOCK_FIELDS = ("quantity", "min_quantity", "max_quantity", "manufacture_date", "expiry_date")

_CREATE_DEFAULTS = {"quantity": Decimal("0")}


def _filter(criterion):
    def apply(query: Query, value: Any) -> Query:
        return query.filter(criterion(value))
    return apply


product_listing = ResourceQuery(
    model=Product,
    search_columns=(
        Product.name,
        Product.slug,
        Product.description,
        Product.short_description,
        Product.brand,
        Product.barcode,
    ),
    sort_columns={
        "name": Product.name,
        "price": Product.price,
        "quantity": Product.quantity,
        "createdAt": Product.created_at,
        "updatedAt": Product.updated_at,
    },
    default_sort=("name", "ASC"),
    base_query=lambda db: db.query(Product).options(selectinload(Product.category)),
    filters={
        "category_id": _filter(lambda v: Product.category_id == v),
        "in_stock": _filter(lambda v: Product.in_stock.is_(v)),
        "min_price": _filter(lambda v: Product.price >= v),
        "max_price": _filter(lambda v: Product.price <= v),
        "unit_type": _filter(lambda v: Product.unit_type == UnitType(v)),
    },
)


def stock_violations(record: Dict[str, Any]) -> List[Tuple[str, str]]:
    """Invariants of a product as stored."""
    errors = []
    quantity = record.get("quantity") or Decimal("0")
    minimum = record.get("min_quantity")
    maximum = record.get("max_quantity")
    if minimum is not None and maximum is not None and minimum > maximum:
        errors.append(("minQuantity", "Minimum quantity cannot be greater than maximum quantity"))
    if minimum is not None and quantity < minimum:
        errors.append(("quantity", "Quantity cannot be less than minimum quantity"))
    if maximum is not None and quantity > maximum:
        errors.append(("quantity", "Quantity cannot exceed maximum quantity"))

    made, expires = record.get("manufacture_date"), record.get("expiry_date")
    if made is not None and expires is not None and made >= expires:
        errors.append(("manufactureDate", "Manufacture date must be before expiry date"))
    return errors


class ProductService(SluggedService):
    resource = "product"
    label = "Product"
    model = Product
    rules = product_rules
    listing = product_listing
    slug_conflict_message = "Product slug already exists"

    def prepare(self, values: Dict[str, Any], entity: Optional[Product]) -> Dict[str, Any]:
        values = super().prepare(values, entity)
        if "unit_type" in values:
            values["unit_type"] = UnitType(values["unit_type"])

        if entity is None:
            merged = {**_CREATE_DEFAULTS, **values}
        else:
            merged = {name: getattr(entity, name) for name in STOCK_FIELDS}
            merged.update(values)

        errors = stock_violations(merged)
        if errors:
            raise ValidationFailure(errors=errors)

        values["in_stock"] = (merged.get("quantity") or Decimal("0")) > 0
        return values
