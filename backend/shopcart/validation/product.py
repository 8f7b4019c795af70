"""Product validation rules."""

from shopcart.core.slug import SLUG_PATTERN
from shopcart.models.product import Product, UnitType
from shopcart.validation.checks import (
    ActiveCategory,
    IsBool,
    IsDecimal,
    IsInt,
    IsIsoDate,
    Length,
    Matches,
    NonNegative,
    NotEmpty,
    NotInPast,
    OneOf,
    Unique,
    after_date,
    before_date,
    not_greater_than,
    not_less_than,
)
from shopcart.validation.listing import detail_rules, list_rules, status_rules
from shopcart.validation.rules import FieldRule, RuleSet

UNIT_TYPES = tuple(unit.value for unit in UnitType)
PRODUCT_SORT_FIELDS = ("name", "price", "quantity", "createdAt", "updatedAt")
DIMENSIONS_PATTERN = r"^(\d+x\d+x\d+|\d+x\d+)$"


def _quantity(field: str, label: str, *extra, digits: int = 10) -> FieldRule:
    return FieldRule(
        field,
        (
            IsDecimal(f"{label} must be a valid decimal number", places=3, digits=digits),
            NonNegative(f"{label} cannot be negative"),
            *extra,
        ),
        nullable=True,
    )


product_rules = RuleSet(
    resource="product",
    create=(
        FieldRule(
            "categoryId",
            (
                IsInt("Category ID must be an integer"),
                ActiveCategory("Category not found or inactive"),
            ),
            required=True,
            required_message="Category ID must be an integer",
        ),
        FieldRule(
            "name",
            (
                NotEmpty("Product name is required"),
                Length("Product name must be between 1 and 200 characters", min=1, max=200),
                Unique("Product name already exists", model=Product, column="name"),
            ),
            required=True,
            required_message="Product name is required",
        ),
        FieldRule(
            "slug",
            (
                Length("Slug must be less than 220 characters", min=1, max=220),
                Matches("Slug can only contain lowercase letters, numbers and hyphens", pattern=SLUG_PATTERN.pattern),
                Unique("Product slug already exists", model=Product, column="slug"),
            ),
        ),
        FieldRule(
            "description",
            (
                NotEmpty("Product description is required"),
                Length("Description must be between 10 and 2000 characters", min=10, max=2000),
            ),
            required=True,
            required_message="Product description is required",
        ),
        FieldRule(
            "shortDescription",
            (Length("Short description cannot exceed 500 characters", max=500),),
            nullable=True,
        ),
        FieldRule(
            "price",
            (
                IsDecimal("Price must be a valid decimal number", places=2, digits=10),
                NonNegative("Price cannot be negative"),
            ),
            required=True,
            required_message="Price must be a valid decimal number",
        ),
        FieldRule(
            "quantity",
            (
                IsDecimal("Quantity must be a valid decimal number", places=3, digits=10),
                NonNegative("Quantity cannot be negative"),
            ),
        ),
        FieldRule("unitType", (OneOf("Invalid unit type", choices=UNIT_TYPES),)),
        _quantity(
            "minQuantity",
            "Minimum quantity",
            not_greater_than("Minimum quantity cannot be greater than maximum quantity", "maxQuantity"),
        ),
        _quantity(
            "maxQuantity",
            "Maximum quantity",
            not_less_than("Maximum quantity cannot be less than minimum quantity", "minQuantity"),
        ),
        FieldRule(
            "manufactureDate",
            (
                IsIsoDate("Manufacture date must be a valid date"),
                before_date("Manufacture date must be before expiry date", "expiryDate"),
            ),
            nullable=True,
        ),
        FieldRule(
            "expiryDate",
            (
                IsIsoDate("Expiry date must be a valid date"),
                NotInPast("Expiry date cannot be in the past"),
                after_date("Expiry date must be after manufacture date", "manufactureDate"),
            ),
            nullable=True,
        ),
        FieldRule(
            "barcode",
            (Length("Barcode must be less than 100 characters", max=100),),
            nullable=True,
        ),
        _quantity("lowStockThreshold", "Low stock threshold"),
        _quantity("weight", "Weight", digits=8),
        FieldRule(
            "dimensions",
            (
                Length("Dimensions must be less than 50 characters", max=50),
                Matches("Dimensions must be in format like '10x5x3' or '10x5'", pattern=DIMENSIONS_PATTERN),
            ),
            nullable=True,
        ),
        FieldRule(
            "brand",
            (Length("Brand must be less than 100 characters", max=100),),
            nullable=True,
        ),
        FieldRule("isActive", (IsBool("isActive must be a boolean"),)),
    ),
    list_query=list_rules(
        PRODUCT_SORT_FIELDS,
        FieldRule("categoryId", (IsInt("Category ID must be an integer"),)),
        FieldRule("inStock", (IsBool("inStock filter must be a boolean"),)),
        FieldRule("minPrice", (IsDecimal("Minimum price must be a valid number", digits=10),)),
        FieldRule("maxPrice", (IsDecimal("Maximum price must be a valid number", digits=10),)),
        FieldRule("unitType", (OneOf("Invalid unit type", choices=UNIT_TYPES),)),
    ),
    operations={
        "detail": detail_rules(),
        "status": status_rules(),
    },
)
