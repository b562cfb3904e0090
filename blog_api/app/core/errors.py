"""
Error types and their HTTP mapping.

Services raise the exceptions defined here; the handlers registered by
``register_exception_handlers`` turn them into JSON responses that
always carry a ``message`` field.  Store failures surface as
``StoreError`` so a raw ``sqlite3`` exception never reaches the
transport layer.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class BlogAPIError(Exception):
    """Base class for errors raised by the blog API."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(BlogAPIError):
    """A request body is missing a required field or is malformed."""

    status_code = status.HTTP_400_BAD_REQUEST


class InvalidIdError(ValidationError):
    """A post id does not have the expected format."""

    def __init__(self, post_id: str) -> None:
        super().__init__(f"Invalid post id: {post_id!r}")
        self.post_id = post_id


class NotFoundError(BlogAPIError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, post_id: str) -> None:
        super().__init__(f"Post {post_id} not found")
        self.post_id = post_id


class StoreError(BlogAPIError):
    """The document store failed to complete an operation."""


def error_response(status_code: int, message: str, errors: list[dict[str, Any]] | None = None) -> JSONResponse:
    """Build a JSON error response with a ``message`` field."""
    body: dict[str, Any] = {"message": message}
    if errors:
        body["errors"] = errors
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


async def blog_api_error_handler(request: Request, exc: BlogAPIError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return error_response(exc.status_code, exc.message)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Give routing errors (unknown path, wrong method) the same body shape."""
    response = error_response(exc.status_code, str(exc.detail))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed request bodies as 400 rather than FastAPI's 422."""
    errors = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
        for err in exc.errors()
    ]
    return error_response(status.HTTP_400_BAD_REQUEST, "Request validation failed", errors)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all for unhandled exceptions: 500 with a generic message."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    debug = request.app.state.settings.debug
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        str(exc) if debug else "An unexpected error occurred.",
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BlogAPIError, blog_api_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
