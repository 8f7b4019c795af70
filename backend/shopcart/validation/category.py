"""Category validation rules."""

from shopcart.core.slug import SLUG_PATTERN
from shopcart.models.category import Category
from shopcart.validation.checks import IsBool, Length, Matches, NotEmpty, Unique
from shopcart.validation.listing import detail_rules, list_rules, status_rules
from shopcart.validation.rules import FieldRule, RuleSet

CATEGORY_SORT_FIELDS = ("name", "slug", "createdAt", "updatedAt")

category_rules = RuleSet(
    resource="category",
    create=(
        FieldRule(
            "name",
            (
                NotEmpty("Category name is required"),
                Length("Category name must be between 1 and 50 characters", min=1, max=50),
                Unique("Category name already exists", model=Category, column="name"),
            ),
            required=True,
            required_message="Category name is required",
        ),
        FieldRule(
            "slug",
            (
                Length("Slug must be less than 100 characters", min=1, max=100),
                Matches("Slug can only contain lowercase letters, numbers and hyphens", pattern=SLUG_PATTERN.pattern),
                Unique("Slug already exists", model=Category, column="slug"),
            ),
        ),
        FieldRule(
            "description",
            (Length("Description must be less than 1000 characters", max=1000),),
            nullable=True,
        ),
        FieldRule("isActive", (IsBool("isActive must be a boolean"),)),
    ),
    list_query=list_rules(CATEGORY_SORT_FIELDS),
    operations={
        "detail": detail_rules(),
        "status": status_rules(),
    },
)
