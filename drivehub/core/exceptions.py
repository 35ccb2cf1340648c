from typing import Any, Dict, List, Optional
from starlette import status


class AppError(Exception):
    def __init__(
        self,
        message: str,
        *,
        status_code: int = status.HTTP_400_BAD_REQUEST,
        code: str = "bad_request",
        field: Optional[str] = None,
        errors: Optional[List[dict]] = None,  # [{'code':..., 'message':..., 'field':...}]
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code
        self.field = field
        self.errors = errors
        self.details = details


class ValidationError(AppError):
    """Malformed input: bad name, oversized or disallowed file."""

    def __init__(self, message: str, *, field: Optional[str] = None, **kwargs):
        kwargs.setdefault("status_code", status.HTTP_400_BAD_REQUEST)
        kwargs.setdefault("code", "validation_error")
        super().__init__(message, field=field, **kwargs)


class FileTooLargeError(ValidationError):
    def __init__(self, message: str, **kwargs):
        super().__init__(
            message,
            field="file",
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            code="file_too_large",
            **kwargs,
        )


class NotFoundError(AppError):
    """Entity absent, soft-deleted or owned by someone else.

    The three cases share one message so callers cannot tell whether another
    user's entity exists.
    """

    def __init__(self, message: str = "Not found", **kwargs):
        kwargs.setdefault("status_code", status.HTTP_404_NOT_FOUND)
        kwargs.setdefault("code", "not_found")
        super().__init__(message, **kwargs)


class ParentNotFoundError(NotFoundError):
    def __init__(self, message: str = "Parent folder not found", **kwargs):
        super().__init__(message, code="parent_not_found", **kwargs)


class DuplicateNameError(AppError):
    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("status_code", status.HTTP_409_CONFLICT)
        kwargs.setdefault("code", "duplicate_name")
        super().__init__(message, **kwargs)


class ConflictError(AppError):
    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("status_code", status.HTTP_409_CONFLICT)
        kwargs.setdefault("code", "conflict")
        super().__init__(message, **kwargs)


class AuthError(AppError):
    def __init__(self, message: str = "Unauthorized", **kwargs):
        kwargs.setdefault("status_code", status.HTTP_401_UNAUTHORIZED)
        kwargs.setdefault("code", "unauthorized")
        super().__init__(message, **kwargs)


class StorageError(AppError):
    """Blob store unavailable, rejected the object, or cannot serve it."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("status_code", status.HTTP_502_BAD_GATEWAY)
        kwargs.setdefault("code", "storage_error")
        super().__init__(message, **kwargs)


class HierarchyIntegrityError(AppError):
    """The stored folder graph is not a tree (cycle or runaway depth)."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("status_code", status.HTTP_500_INTERNAL_SERVER_ERROR)
        kwargs.setdefault("code", "hierarchy_integrity")
        super().__init__(message, **kwargs)
