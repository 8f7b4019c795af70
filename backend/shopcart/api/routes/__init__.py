"""API routes."""

from fastapi import APIRouter

from shopcart.api.routes import admins, categories, products

api_router = APIRouter()

api_router.include_router(admins.router, prefix="/admins", tags=["admins"])
api_router.include_router(categories.router, prefix="/categories", tags=["categories"])
api_router.include_router(products.router, prefix="/products", tags=["products"])
