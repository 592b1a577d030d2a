"""RFC 7807 Problem Details schema for error responses."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ProblemDetails(BaseModel):
    """RFC 7807 Problem Details for HTTP APIs.

    See: https://datatracker.ietf.org/doc/html/rfc7807

    Example:
        return JSONResponse(
            status_code=422,
            content=ProblemDetails(
                type="invalid-cursor",
                title="Validation Error",
                status=422,
                detail="Invalid cursor token",
                instance="/api/v1/icons/search"
            ).model_dump(exclude_none=True)
        )
    """

    type: str = Field(
        default="about:blank",
        min_length=1,
        max_length=200,
        description="URI reference identifying the problem type",
    )
    title: str = Field(
        min_length=1, max_length=200, description="Short, human-readable summary of the problem"
    )
    status: int = Field(ge=100, le=599, description="HTTP status code")
    detail: str | None = Field(
        default=None,
        max_length=2000,
        description="Human-readable explanation specific to this occurrence",
    )
    instance: str | None = Field(
        default=None,
        max_length=500,
        description="URI reference identifying the specific occurrence",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "type": "invalid-cursor",
                "title": "Validation Error",
                "status": 422,
                "detail": "Invalid cursor token",
                "instance": "/api/v1/icons/search",
            }
        },
        str_strip_whitespace=True,
    )


class FieldError(BaseModel):
    """Single field-level validation failure."""

    field: str
    message: str
    type: str


class ValidationProblemDetails(ProblemDetails):
    """Problem details carrying per-field validation errors."""

    errors: list[FieldError] = Field(default_factory=list)
