import logging
from typing import Any, List, Optional

from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from blogcms.core import exceptions
from blogcms.core.response.schemas import ErrorDetail, ErrorResponse

logger = logging.getLogger(__name__)


def success_response(data: Any = None, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    """Serialize a payload as-is; API consumers expect bare records."""
    return JSONResponse(status_code=status_code, content=jsonable_encoder(data))


def error_response(
    error_code: str,
    message: str,
    status_code: int = status.HTTP_400_BAD_REQUEST,
    details: Optional[List[ErrorDetail]] = None,
    headers: Optional[dict] = None,
) -> JSONResponse:
    body = ErrorResponse(
        message=message,
        error_code=error_code,
        error_details=details or [],
    )
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(),
        headers=headers,
    )


async def service_exception_handler(request: Request, exc: exceptions.ServiceException):
    return error_response(
        error_code=exc.error_code,
        message=str(exc.detail),
        status_code=exc.status_code,
        details=exc.error_details,
        headers=exc.headers,
    )


async def request_validation_handler(request: Request, exc: RequestValidationError):
    return error_response(
        error_code=exceptions.ValidationException.error_code,
        message="Request validation failed",
        status_code=422,
        details=exceptions.error_details_from(exc.errors()),
    )


async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(
        error_code="INTERNAL_ERROR",
        message="Something went wrong!",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
