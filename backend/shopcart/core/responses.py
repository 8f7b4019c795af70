"""Standardized API response helpers.

Every endpoint answers with the same envelope:
    {"success": true, "message": "...", "data": ...}

List endpoints additionally include:
    {"success": true, "data": [...], "pagination": {...}, "filters": {...}}

Errors use {"success": false, "message": "..." | [...]} and are produced by
the exception handlers in shopcart.main.
"""

from typing import Any, Optional

from pydantic import BaseModel


def _dump(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True)
    if isinstance(value, list):
        return [_dump(item) for item in value]
    return value


def success_response(data: Any = None, message: Optional[str] = None) -> dict:
    """Wrap a single payload (or nothing) in the success envelope."""
    body: dict = {"success": True}
    if message is not None:
        body["message"] = message
    if data is not None:
        body["data"] = _dump(data)
    return body


def paginated_response(items: list, pagination: BaseModel, filters: dict) -> dict:
    """Wrap a page of items with its pagination block and the applied filters."""
    return {
        "success": True,
        "data": _dump(items),
        "pagination": _dump(pagination),
        "filters": filters,
    }


def error_response(message: Any, errors: Optional[list] = None) -> dict:
    body = {"success": False, "message": message}
    if errors:
        body["errors"] = [{"field": field, "message": msg} for field, msg in errors]
    return body
