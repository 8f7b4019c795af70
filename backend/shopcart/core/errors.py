"""Application error taxonomy.

Services raise these; the handlers in ``shopcart.main`` turn them into the
``{"success": false, "message": ...}`` envelope with the matching status.
"""

from typing import List, Optional, Sequence, Tuple, Union

from fastapi import status

Message = Union[str, List[str]]
FieldError = Tuple[str, str]


class AppError(Exception):
    """Base class for errors that map onto an HTTP response.

    ``errors`` optionally keeps ``(field, message)`` pairs; when no explicit
    message is given the response message is the list of their messages.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Server Error"

    def __init__(self, message: Optional[Message] = None, errors: Optional[Sequence[FieldError]] = None):
        self.errors: List[FieldError] = list(errors or [])
        if message is None:
            message = [msg for _, msg in self.errors] if self.errors else self.default_message
        self.message: Message = message
        super().__init__(message if isinstance(message, str) else "; ".join(message))


class ValidationFailure(AppError):
    """One or more validation rules were violated."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Validation failed"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class ConflictError(AppError):
    """Uniqueness violation (duplicate email, name or slug)."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Duplicate value"


class InvalidReferenceError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Reference error: Invalid foreign key"


class StateError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Operation not allowed in the current state"


class AuthTokenError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid token"


class StoreUnavailable(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Database connection error"
