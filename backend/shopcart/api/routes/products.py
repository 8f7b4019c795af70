"""Product routes."""

from typing import Any

from fastapi import APIRouter, Body, Path, Request, Response, status

from shopcart.api.routes.common import MAX_ID, body_or_empty, page_links, query_dict
from shopcart.core.rate_limit import API_SCOPE, api_rate_limit, limiter
from shopcart.core.responses import paginated_response, success_response
from shopcart.db.session import DbSession
from shopcart.schemas.product import ProductResponse
from shopcart.services.product_service import ProductService

router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED)
@limiter.shared_limit(api_rate_limit, scope=API_SCOPE)
def create_product(request: Request, response: Response, db: DbSession, payload: Any = Body(None)):
    """Create a product. The slug is derived from the name and ``inStock`` from the quantity."""
    product = ProductService(db).create(body_or_empty(payload))
    return success_response(ProductResponse.model_validate(product), "Product created successfully")


@router.get("")
@limiter.shared_limit(api_rate_limit, scope=API_SCOPE)
def list_products(request: Request, response: Response, db: DbSession):
    """List products. Filters: categoryId, minPrice, maxPrice, inStock, unitType."""
    page = ProductService(db).list(query_dict(request), page_links(request))
    items = [ProductResponse.model_validate(p) for p in page.rows]
    return paginated_response(items, page.pagination, page.filters)


@router.get("/{product_id}")
@limiter.shared_limit(api_rate_limit, scope=API_SCOPE)
def get_product(request: Request, response: Response, db: DbSession, product_id: int = Path(gt=0, le=MAX_ID)):
    product, _ = ProductService(db).get(product_id, query_dict(request))
    return success_response(ProductResponse.model_validate(product))


@router.put("/{product_id}")
@limiter.shared_limit(api_rate_limit, scope=API_SCOPE)
def update_product(
    request: Request,
    response: Response,
    db: DbSession,
    product_id: int = Path(gt=0, le=MAX_ID),
    payload: Any = Body(None),
):
    product = ProductService(db).update(product_id, body_or_empty(payload))
    return success_response(ProductResponse.model_validate(product), "Product updated successfully")


@router.delete("/{product_id}")
@limiter.shared_limit(api_rate_limit, scope=API_SCOPE)
def delete_product(request: Request, response: Response, db: DbSession, product_id: int = Path(gt=0, le=MAX_ID)):
    """Soft delete. Repeating the call on a deleted product is a no-op."""
    ProductService(db).delete(product_id)
    return success_response(message="Product deleted successfully")


@router.patch("/{product_id}/restore")
@limiter.shared_limit(api_rate_limit, scope=API_SCOPE)
def restore_product(request: Request, response: Response, db: DbSession, product_id: int = Path(gt=0, le=MAX_ID)):
    product = ProductService(db).restore(product_id)
    return success_response(ProductResponse.model_validate(product), "Product restored successfully")


@router.patch("/{product_id}/status")
@limiter.shared_limit(api_rate_limit, scope=API_SCOPE)
def set_product_status(
    request: Request,
    response: Response,
    db: DbSession,
    product_id: int = Path(gt=0, le=MAX_ID),
    payload: Any = Body(None),
):
    product = ProductService(db).set_status(product_id, body_or_empty(payload))
    return success_response(ProductResponse.model_validate(product), "Product status updated successfully")
