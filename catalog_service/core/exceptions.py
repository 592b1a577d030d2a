"""HTTP-facing exceptions rendered as RFC 7807 problem details.

Each subclass fixes a status code, a problem ``type`` and a ``title``;
raising sites only supply the detail and any structured context:

    raise InvalidCursorException(extra={"field": "createdAt"})
    -> 422 {"type": "invalid-cursor", "title": "Validation Error", "field": "createdAt", ...}

Repository-level errors live in ``core.database.exceptions`` and are mapped
to problems by the application's exception handlers.
"""

from __future__ import annotations

from typing import Any, ClassVar

DEFAULT_TITLES: dict[int, str] = {
    400: "Bad Request",
    404: "Not Found",
    409: "Conflict",
    422: "Unprocessable Entity",
    500: "Internal Server Error",
    503: "Service Unavailable",
}


def default_title(status_code: int) -> str:
    return DEFAULT_TITLES.get(status_code, "Error")


class AppException(Exception):
    """Base application exception.

    Attributes:
        status_code: HTTP status of the response.
        detail: Human-readable explanation of this occurrence.
        type: Problem type identifier.
        title: Short summary of the problem type.
        instance: URI of this occurrence; the handler falls back to the
            request path.
        extra: Merged into the problem body as top-level members.
    """

    def __init__(
        self,
        status_code: int,
        detail: str,
        type: str = "about:blank",
        title: str | None = None,
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        self.status_code = status_code
        self.detail = detail
        self.type = type
        self.title = title or default_title(status_code)
        self.instance = instance
        self.extra = extra or {}
        super().__init__(detail)


class _FixedStatusException(AppException):
    status: ClassVar[int]
    problem_type: ClassVar[str]
    problem_title: ClassVar[str]

    def __init__(
        self,
        detail: str,
        type: str | None = None,
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            status_code=self.status,
            detail=detail,
            type=type or self.problem_type,
            title=self.problem_title,
            instance=instance,
            extra=extra,
        )


class NotFoundException(_FixedStatusException):
    """A requested catalog resource does not exist (404)."""

    status = 404
    problem_type = "not-found"
    problem_title = "Not Found"


class ValidationException(_FixedStatusException):
    """Request parameters are well-formed but cannot be honoured (422).

    Example:
        raise ValidationException(
            detail="Cannot sort by 'colour'",
            type="invalid-sort",
            extra={"sort_by": "colour"},
        )
    """

    status = 422
    problem_type = "validation-error"
    problem_title = "Validation Error"


class ServiceUnavailableException(_FixedStatusException):
    """A backing service needed by the request is not ready (503)."""

    status = 503
    problem_type = "service-unavailable"
    problem_title = "Service Unavailable"


class InvalidCursorException(ValidationException):
    """Raised when a pagination cursor cannot be used to seek.

    Pagination rejects tokens that fail to decode into a cursor carrying
    an ``id``, and cursors whose sort values do not fit the requested sort.
    """

    def __init__(
        self,
        detail: str = "Invalid cursor token",
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(detail=detail, type="invalid-cursor", extra=extra)


__all__ = [
    "DEFAULT_TITLES",
    "AppException",
    "InvalidCursorException",
    "NotFoundException",
    "ServiceUnavailableException",
    "ValidationException",
    "default_title",
]
