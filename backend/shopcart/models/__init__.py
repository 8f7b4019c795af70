"""SQLAlchemy models."""

from shopcart.models.user import AccountType, AdminProfile, AuthProvider, User
from shopcart.models.category import Category
from shopcart.models.product import Product, UnitType

__all__ = [
    "AccountType",
    "AdminProfile",
    "AuthProvider",
    "Category",
    "Product",
    "UnitType",
    "User",
]
