import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from shopease.exceptions import (
    Conflict,
    NotFound,
    ShopEaseError,
    StorageUnavailable,
    ValidationError,
)
from shopease.schemas.validation import first_error

logger = logging.getLogger(__name__)

# Most specific first: InsufficientStockError and DeadlineExceeded inherit
# their status from Conflict and StorageUnavailable.
STATUS_CODES = (
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (NotFound, status.HTTP_404_NOT_FOUND),
    (Conflict, status.HTTP_409_CONFLICT),
    (StorageUnavailable, status.HTTP_500_INTERNAL_SERVER_ERROR),
)


def status_for(exc: ShopEaseError) -> int:
    for error_type, status_code in STATUS_CODES:
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def shopease_error_handler(request: Request, exc: ShopEaseError) -> JSONResponse:
    """Render a data access error with its mapped status code."""
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error(f"{exc.kind} on {request.method} {request.url.path}: {exc.message}")

    content = exc.to_dict()
    if isinstance(exc, StorageUnavailable):
        content["retryable"] = True
    return JSONResponse(status_code=status_code, content=content)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed request bodies/params as 400, like service-level validation."""
    field, reason = first_error(exc.errors())
    error = ValidationError(field, reason)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=error.to_dict())


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ShopEaseError, shopease_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
