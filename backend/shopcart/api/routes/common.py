"""Helpers shared by the resource routers."""

from typing import Any, Callable, Dict

from fastapi import Request

from shopcart.validation.checks import MAX_INT

# Ids above this can never match a row and would overflow the driver
MAX_ID = MAX_INT


def body_or_empty(payload: Any) -> Any:
    """A missing body is validated like an empty object."""
    return {} if payload is None else payload


def query_dict(request: Request) -> Dict[str, str]:
    return dict(request.query_params)


def page_links(request: Request) -> Callable[[int, int], str]:
    """Navigation links keep every other query parameter of the request."""

    def link(page: int, limit: int) -> str:
        return str(request.url.include_query_params(page=page, limit=limit))

    return link
