from typing import List, Optional

from fastapi import HTTPException, status

from blogcms.core.response.schemas import ErrorDetail


class ServiceException(HTTPException):
    """Base class for errors surfaced to API clients."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code: str = "SERVICE_ERROR"

    def __init__(
        self,
        detail: str,
        error_details: Optional[List[ErrorDetail]] = None,
        status_code: Optional[int] = None,
        headers: Optional[dict] = None,
    ):
        super().__init__(
            status_code=status_code or self.__class__.status_code,
            detail=detail,
            headers=headers,
        )
        self.error_details = error_details or []


class ValidationException(ServiceException):
    status_code = 422
    error_code = "VALIDATION_ERROR"


class NotFoundException(ServiceException):
    status_code = status.HTTP_404_NOT_FOUND
    error_code = "NOT_FOUND"


class ConflictException(ServiceException):
    status_code = status.HTTP_409_CONFLICT
    error_code = "CONFLICT"


class UnauthorizedException(ServiceException):
    status_code = status.HTTP_401_UNAUTHORIZED
    error_code = "UNAUTHORIZED"

    def __init__(self, detail: str = "Access token required", **kwargs):
        kwargs.setdefault("headers", {"WWW-Authenticate": "Bearer"})
        super().__init__(detail, **kwargs)


class ForbiddenException(ServiceException):
    status_code = status.HTTP_403_FORBIDDEN
    error_code = "FORBIDDEN"


class InvalidTokenException(ForbiddenException):
    error_code = "INVALID_TOKEN"

    def __init__(self, detail: str = "Invalid token", **kwargs):
        super().__init__(detail, **kwargs)


class TokenExpiredException(ForbiddenException):
    error_code = "TOKEN_EXPIRED"

    def __init__(self, detail: str = "Token has expired", **kwargs):
        super().__init__(detail, **kwargs)


class UnsupportedMediaException(ServiceException):
    status_code = status.HTTP_415_UNSUPPORTED_MEDIA_TYPE
    error_code = "UNSUPPORTED_MEDIA"


class PayloadTooLargeException(ServiceException):
    status_code = 413
    error_code = "PAYLOAD_TOO_LARGE"


def error_details_from(errors) -> List[ErrorDetail]:
    """Convert pydantic error dicts into ErrorDetail entries."""
    details = []
    for err in errors:
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        details.append(
            ErrorDetail(
                field=".".join(loc),
                code=str(err.get("type", "invalid")).upper(),
                message=err.get("msg", "Invalid value"),
            )
        )
    return details
