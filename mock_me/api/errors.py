"""
Error mapping at the HTTP boundary.

Routers unwrap service ``Result`` values; a ``Failure`` is raised as its
``ResourceError`` and rendered here as ``{code, message[, details]}`` with
the error's HTTP status.
"""
import logging
from typing import TypeVar

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from mock_me.core.errors import ResourceError
from mock_me.core.result import Result

logger = logging.getLogger(__name__)

T = TypeVar("T")


def unwrap(result: Result[T, ResourceError]) -> T:
    """Return the success value or raise the carried error."""
    if result.is_error():
        raise result.error
    return result.value


def error_response(error: ResourceError) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if error.status_code == status.HTTP_401_UNAUTHORIZED else None
    return JSONResponse(
        status_code=error.status_code,
        content=jsonable_encoder(error.to_dict()),
        headers=headers,
    )


async def resource_error_handler(request: Request, exc: ResourceError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.code} {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} -> {exc.status_code} {exc.code}")
    return error_response(exc)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={
            "code": "VALIDATION_ERROR",
            "message": "Request validation failed",
            "errors": jsonable_encoder(exc.errors()),
        },
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"code": "INTERNAL_ERROR", "message": "An unexpected error occurred"},
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ResourceError, resource_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
