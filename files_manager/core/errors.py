"""
Error taxonomy of the service and the FastAPI handlers that render it.

Every failure reaches the client as ``{"error": <detail>}`` with the
status code carried by the exception.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class FilesManagerError(Exception):
    """Base class; carries the client-facing detail and HTTP status."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(detail)


class UnauthorizedError(FilesManagerError):
    """Missing, unknown or expired token, or bad credentials."""

    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self):
        super().__init__("Unauthorized")


class ValidationError(FilesManagerError):
    status_code = status.HTTP_400_BAD_REQUEST


class BadRequestError(FilesManagerError):
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(FilesManagerError):
    """Unknown id, malformed id, or an access denial masked as absence."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self):
        super().__init__("Not found")


class InternalError(FilesManagerError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def error_response(detail: str, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": detail})


async def files_manager_error_handler(request: Request, exc: FilesManagerError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
    return error_response(exc.detail, exc.status_code)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    detail = errors[0]["msg"] if errors else "Bad request"
    return error_response(detail, status.HTTP_400_BAD_REQUEST)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return error_response(detail, exc.status_code)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return error_response("Internal Server Error", status.HTTP_500_INTERNAL_SERVER_ERROR)


def add_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(FilesManagerError, files_manager_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
