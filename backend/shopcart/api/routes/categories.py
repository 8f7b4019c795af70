"""Category routes."""

from typing import Any

from fastapi import APIRouter, Body, Path, Request, Response, status

from shopcart.api.routes.common import MAX_ID, body_or_empty, page_links, query_dict
from shopcart.core.rate_limit import API_SCOPE, api_rate_limit, limiter
from shopcart.core.responses import paginated_response, success_response
from shopcart.db.session import DbSession
from shopcart.schemas.category import CategoryResponse
from shopcart.services.category_service import CategoryService

router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED)
@limiter.shared_limit(api_rate_limit, scope=API_SCOPE)
def create_category(request: Request, response: Response, db: DbSession, payload: Any = Body(None)):
    """Create a category. The slug is derived from the name when omitted."""
    category = CategoryService(db).create(body_or_empty(payload))
    return success_response(CategoryResponse.model_validate(category), "Category created successfully")


@router.get("")
@limiter.shared_limit(api_rate_limit, scope=API_SCOPE)
def list_categories(request: Request, response: Response, db: DbSession):
    """List categories with search, visibility filters, sorting and pagination."""
    page = CategoryService(db).list(query_dict(request), page_links(request))
    items = [CategoryResponse.model_validate(c) for c in page.rows]
    return paginated_response(items, page.pagination, page.filters)


@router.get("/{category_id}")
@limiter.shared_limit(api_rate_limit, scope=API_SCOPE)
def get_category(request: Request, response: Response, db: DbSession, category_id: int = Path(gt=0, le=MAX_ID)):
    category, _ = CategoryService(db).get(category_id, query_dict(request))
    return success_response(CategoryResponse.model_validate(category))


@router.put("/{category_id}")
@limiter.shared_limit(api_rate_limit, scope=API_SCOPE)
def update_category(
    request: Request,
    response: Response,
    db: DbSession,
    category_id: int = Path(gt=0, le=MAX_ID),
    payload: Any = Body(None),
):
    category = CategoryService(db).update(category_id, body_or_empty(payload))
    return success_response(CategoryResponse.model_validate(category), "Category updated successfully")


@router.delete("/{category_id}")
@limiter.shared_limit(api_rate_limit, scope=API_SCOPE)
def delete_category(request: Request, response: Response, db: DbSession, category_id: int = Path(gt=0, le=MAX_ID)):
    """Soft delete. Repeating the call on a deleted category is a no-op."""
    CategoryService(db).delete(category_id)
    return success_response(message="Category deleted successfully")


@router.patch("/{category_id}/restore")
@limiter.shared_limit(api_rate_limit, scope=API_SCOPE)
def restore_category(request: Request, response: Response, db: DbSession, category_id: int = Path(gt=0, le=MAX_ID)):
    category = CategoryService(db).restore(category_id)
    return success_response(CategoryResponse.model_validate(category), "Category restored successfully")


@router.patch("/{category_id}/status")
@limiter.shared_limit(api_rate_limit, scope=API_SCOPE)
def set_category_status(
    request: Request,
    response: Response,
    db: DbSession,
    category_id: int = Path(gt=0, le=MAX_ID),
    payload: Any = Body(None),
):
    category = CategoryService(db).set_status(category_id, body_or_empty(payload))
    return success_response(CategoryResponse.model_validate(category), "Category status updated successfully")
