"""Category lifecycle."""

from shopcart.models.category import Category
from shopcart.services.lifecycle import SluggedService
from shopcart.services.query_builder import ResourceQuery
from shopcart.validation.category import category_rules

category_listing = ResourceQuery(
    model=Category,
    search_columns=(Category.name, Category.slug, Category.description),
    sort_columns={
        "name": Category.name,
        "slug": Category.slug,
        "createdAt": Category.created_at,
        "updatedAt": Category.updated_at,
    },
    default_sort=("name", "ASC"),
)


class CategoryService(SluggedService):
    resource = "category"
    label = "Category"
    model = Category
    rules = category_rules
    listing = category_listing
