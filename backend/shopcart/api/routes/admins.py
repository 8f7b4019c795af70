"""Admin routes. An admin is a user account plus its admin profile."""

from typing import Any, Mapping

from fastapi import APIRouter, Body, Path, Request, Response, status

from shopcart.api.routes.common import MAX_ID, body_or_empty, page_links, query_dict
from shopcart.core.rate_limit import API_SCOPE, api_rate_limit, limiter
from shopcart.core.responses import paginated_response, success_response
from shopcart.db.session import DbSession
from shopcart.models.user import User
from shopcart.schemas.admin import AdminResponse, AdminWithProfileResponse
from shopcart.services.admin_service import AdminService

router = APIRouter()


def serialize_admin(user: User, include_profile: bool = True) -> AdminResponse:
    if include_profile:
        return AdminWithProfileResponse.model_validate(user)
    return AdminResponse.model_validate(user)


def _wants_profile(options: Mapping[str, Any]) -> bool:
    return options.get("include_profile", True) is not False


@router.post("", status_code=status.HTTP_201_CREATED)
@limiter.shared_limit(api_rate_limit, scope=API_SCOPE)
def create_admin(request: Request, response: Response, db: DbSession, payload: Any = Body(None)):
    """Create the user account and its profile in one transaction."""
    admin = AdminService(db).create(body_or_empty(payload))
    return success_response(serialize_admin(admin), "Admin created successfully")


@router.get("")
@limiter.shared_limit(api_rate_limit, scope=API_SCOPE)
def list_admins(request: Request, response: Response, db: DbSession):
    """List admins. Search covers email, first and last name; ``city`` filters on the profile."""
    page = AdminService(db).list(query_dict(request), page_links(request))
    include_profile = _wants_profile(page.options)
    items = [serialize_admin(user, include_profile) for user in page.rows]
    return paginated_response(items, page.pagination, page.filters)


@router.get("/{admin_id}")
@limiter.shared_limit(api_rate_limit, scope=API_SCOPE)
def get_admin(request: Request, response: Response, db: DbSession, admin_id: int = Path(gt=0, le=MAX_ID)):
    admin, options = AdminService(db).get(admin_id, query_dict(request))
    return success_response(serialize_admin(admin, _wants_profile(options)))


@router.put("/{admin_id}")
@limiter.shared_limit(api_rate_limit, scope=API_SCOPE)
def update_admin(
    request: Request,
    response: Response,
    db: DbSession,
    admin_id: int = Path(gt=0, le=MAX_ID),
    payload: Any = Body(None),
):
    """Update account and profile fields; a new password is hashed before storage."""
    admin = AdminService(db).update(admin_id, body_or_empty(payload))
    return success_response(serialize_admin(admin), "Admin updated successfully")


@router.delete("/{admin_id}")
@limiter.shared_limit(api_rate_limit, scope=API_SCOPE)
def delete_admin(request: Request, response: Response, db: DbSession, admin_id: int = Path(gt=0, le=MAX_ID)):
    """Soft delete the account together with its profile."""
    AdminService(db).delete(admin_id)
    return success_response(message="Admin deleted successfully")


@router.patch("/{admin_id}/restore")
@limiter.shared_limit(api_rate_limit, scope=API_SCOPE)
def restore_admin(request: Request, response: Response, db: DbSession, admin_id: int = Path(gt=0, le=MAX_ID)):
    admin = AdminService(db).restore(admin_id)
    return success_response(serialize_admin(admin), "Admin and profile restored successfully")


@router.patch("/{admin_id}/status")
@limiter.shared_limit(api_rate_limit, scope=API_SCOPE)
def set_admin_status(
    request: Request,
    response: Response,
    db: DbSession,
    admin_id: int = Path(gt=0, le=MAX_ID),
    payload: Any = Body(None),
):
    admin = AdminService(db).set_status(admin_id, body_or_empty(payload))
    return success_response(serialize_admin(admin), "Admin status updated successfully")


@router.patch("/{admin_id}/password")
@limiter.shared_limit(api_rate_limit, scope=API_SCOPE)
def change_admin_password(
    request: Request,
    response: Response,
    db: DbSession,
    admin_id: int = Path(gt=0, le=MAX_ID),
    payload: Any = Body(None),
):
    AdminService(db).change_password(admin_id, body_or_empty(payload))
    return success_response(message="Password updated successfully")
