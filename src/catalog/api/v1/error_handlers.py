"""
FastAPI exception handlers: the single place where errors become HTTP responses.

- Services and repositories raise `catalog.exceptions.base.*` errors.
- Status codes come from `RepositoryError.http_status()` (one error-code table).
- Every body has the shape `{"timestamp", "message", "details"}`.
- Request validation failures become 400 with the same body shape.
- Anything else is left to the framework default (500).
"""

import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from catalog.exceptions.base import (
    RepositoryError,
    DuplicateError,
    InvalidFieldError,
    NotFoundError,
    error_body,
)

logger = logging.getLogger(__name__)


def describe_request(request: Request) -> str:
    return f"uri={request.url.path}"


def _respond(request: Request, exc: RepositoryError) -> JSONResponse:
    return JSONResponse(status_code=exc.http_status(), content=exc.to_payload(describe_request(request)))


async def duplicate_error_handler(request: Request, exc: DuplicateError) -> JSONResponse:
    """409 Conflict."""
    logger.info("DuplicateError for %s %s: fields=%s", request.method, request.url.path, exc.fields)
    return _respond(request, exc)


async def invalid_field_handler(request: Request, exc: InvalidFieldError) -> JSONResponse:
    """422 Unprocessable Entity."""
    logger.info("InvalidFieldError for %s %s: fields=%s", request.method, request.url.path, exc.fields)
    return _respond(request, exc)


async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    """404 Not Found."""
    logger.info("NotFoundError for %s %s: %s", request.method, request.url.path, exc.message)
    return _respond(request, exc)


async def repository_error_handler(request: Request, exc: RepositoryError) -> JSONResponse:
    """
    Fallback for other repository errors (400 unless the error code says otherwise,
    500 for `database_error`).
    """
    if exc.http_status() >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("RepositoryError for %s %s: %s", request.method, request.url.path, str(exc))
    else:
        logger.warning("RepositoryError for %s %s: %s", request.method, request.url.path, str(exc))
    return _respond(request, exc)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """400 Bad Request for bodies/paths that fail validation."""
    problems = []
    for err in exc.errors():
        # loc looks like ("body", "name") or ("path", "category_id")
        location = ".".join(str(part) for part in err.get("loc", ())[1:]) or "request"
        problems.append(f"{location}: {err.get('msg')}")
    message = "Validation failed: " + "; ".join(problems)

    logger.info("Validation failed for %s %s: %s", request.method, request.url.path, problems)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(message, describe_request(request)),
    )


# Most specific first.
def register_exception_handlers(app):
    app.add_exception_handler(DuplicateError, duplicate_error_handler)
    app.add_exception_handler(InvalidFieldError, invalid_field_handler)
    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(RepositoryError, repository_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
