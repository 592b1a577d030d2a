"""Tests for application and repository exceptions."""

from __future__ import annotations

from catalog_service.core.database import InvalidFilterError, NotFoundError, RepositoryError
from catalog_service.core.exceptions import (
    AppException,
    InvalidCursorException,
    NotFoundException,
    ServiceUnavailableException,
    ValidationException,
)


class TestAppExceptions:
    """HTTP-facing exception hierarchy."""

    def test_app_exception_defaults(self):
        exc = AppException(status_code=503, detail="down")
        assert exc.type == "about:blank"
        assert exc.title == "Service Unavailable"
        assert exc.extra == {}
        assert str(exc) == "down"

    def test_unknown_status_title(self):
        assert AppException(status_code=418, detail="teapot").title == "Error"

    def test_not_found(self):
        exc = NotFoundException("Icon 1 not found", extra={"icon_id": 1})
        assert exc.status_code == 404
        assert exc.type == "not-found"
        assert exc.extra == {"icon_id": 1}

    def test_validation(self):
        exc = ValidationException("bad", type="invalid-sort")
        assert exc.status_code == 422
        assert exc.title == "Validation Error"

    def test_invalid_cursor(self):
        exc = InvalidCursorException()
        assert isinstance(exc, ValidationException)
        assert exc.status_code == 422
        assert exc.type == "invalid-cursor"
        assert exc.detail == "Invalid cursor token"

    def test_service_unavailable_accepts_custom_type(self):
        exc = ServiceUnavailableException("Cache service is not initialised", type="cache-unavailable")
        assert exc.status_code == 503
        assert exc.type == "cache-unavailable"
        assert exc.title == "Service Unavailable"


class TestRepositoryErrors:
    """Repository errors carry structured details."""

    def test_str_includes_details(self):
        exc = RepositoryError("boom", {"table": "icons"})
        assert str(exc) == "boom (table='icons')"
        assert str(RepositoryError("plain")) == "plain"

    def test_not_found(self):
        exc = NotFoundError("Icon", {"id": 3})
        assert exc.message == "Icon not found with id=3"
        assert exc.details == {"model": "Icon", "id": 3}
        assert repr(exc) == "NotFoundError(model='Icon', identifier={'id': 3})"

    def test_invalid_filter(self):
        exc = InvalidFilterError("Unknown filter field for Icon", filter_name="colour")
        assert exc.filter_name == "colour"
        assert exc.details == {"filter": "colour"}
        assert InvalidFilterError("x").details == {}
