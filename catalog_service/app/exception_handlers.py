"""Global exception handlers rendering RFC 7807 problem details."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from catalog_service.core.database.exceptions import (
    InvalidFilterError,
    NotFoundError,
    RepositoryError,
)
from catalog_service.core.exceptions import AppException, default_title
from catalog_service.core.schemas.problem_details import (
    FieldError,
    ProblemDetails,
    ValidationProblemDetails,
)

logger = logging.getLogger(__name__)

def _problem(
    status_code: int,
    detail: str,
    type_: str = "about:blank",
    title: str | None = None,
    instance: str | None = None,
    extra: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Build an RFC 7807 body, with ``extra`` merged at the top level."""
    problem = ProblemDetails(
        type=type_,
        title=title or default_title(status_code),
        status=status_code,
        detail=detail,
        instance=instance,
    )
    response_data = problem.model_dump(exclude_none=True)
    if extra:
        response_data.update(extra)
    return response_data


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Render AppException (and subclasses such as InvalidCursorException)."""
    logger.warning(
        "Application exception occurred",
        extra={
            "path": request.url.path,
            "method": request.method,
            "exception_type": exc.type,
            "status_code": exc.status_code,
            "detail": exc.detail,
        },
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=_problem(
            status_code=exc.status_code,
            detail=exc.detail,
            type_=exc.type,
            title=exc.title,
            instance=exc.instance or request.url.path,
            extra=exc.extra,
        ),
    )


async def repository_exception_handler(request: Request, exc: RepositoryError) -> JSONResponse:
    """Map repository errors: not found -> 404, bad filter -> 422, else 500."""
    if isinstance(exc, NotFoundError):
        status_code, type_ = status.HTTP_404_NOT_FOUND, "not-found"
        detail = exc.message
    elif isinstance(exc, InvalidFilterError):
        status_code, type_ = status.HTTP_422_UNPROCESSABLE_ENTITY, "invalid-filter"
        detail = exc.message
    else:
        status_code, type_ = status.HTTP_500_INTERNAL_SERVER_ERROR, "repository-error"
        detail = "An unexpected error occurred while processing your request"

    log = logger.error if status_code >= 500 else logger.info
    log(
        "Repository error",
        extra={
            "path": request.url.path,
            "method": request.method,
            "exception_type": type(exc).__name__,
            "status_code": status_code,
            "details": exc.details,
        },
    )
    extra = exc.details if status_code < 500 else None
    return JSONResponse(
        status_code=status_code,
        content=_problem(
            status_code=status_code,
            detail=detail,
            type_=type_,
            instance=request.url.path,
            extra={k: str(v) for k, v in extra.items()} if extra else None,
        ),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render request validation errors with per-field entries."""
    field_errors = [
        FieldError(
            field=".".join(str(loc) for loc in error["loc"]),
            message=error["msg"],
            type=error["type"],
        )
        for error in exc.errors()
    ]
    logger.warning(
        "Request validation failed",
        extra={
            "path": request.url.path,
            "method": request.method,
            "error_count": len(field_errors),
        },
    )
    problem = ValidationProblemDetails(
        type="validation-error",
        title="Validation Error",
        status=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail=f"Request validation failed for {len(field_errors)} field(s)",
        instance=request.url.path,
        errors=field_errors,
    )
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=problem.model_dump(exclude_none=True),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all: log with traceback, hide internals from the client."""
    logger.error(
        "Unexpected exception occurred",
        extra={
            "path": request.url.path,
            "method": request.method,
            "exception_type": type(exc).__name__,
            "exception_message": str(exc),
        },
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_problem(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred while processing your request",
            type_="internal-error",
            instance=request.url.path,
        ),
    )


def configure_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on ``app``."""
    app.add_exception_handler(AppException, app_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RepositoryError, repository_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, generic_exception_handler)
