"""Shared API schemas."""

from catalog_service.core.schemas.base import CustomBase
from catalog_service.core.schemas.problem_details import (
    FieldError,
    ProblemDetails,
    ValidationProblemDetails,
)

__all__ = [
    "CustomBase",
    "FieldError",
    "ProblemDetails",
    "ValidationProblemDetails",
]
