"""Cursor encoding and decoding for keyset pagination.

Cursors are opaque strings that encode the position in a result set.
They contain the values of the sort fields for a boundary row, keyed by
their API (camelCase) names, plus the row ``id`` tiebreaker:

    {"createdAt": "2025-01-15T10:30:00+00:00", "id": 42, "direction": "next"}

Relevance-sorted pages carry a position in the ranking list instead:

    {"arrayPosition": 7, "id": 42, "sortType": "arrayPosition", "direction": "next"}

The payload is compact JSON, URL-safe base64 encoded.

The codec is fail-open: malformed input yields ``None`` plus a warning and
never raises. Callers that need a cursor (the pagination engine) decide
whether ``None`` is an error.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
from collections.abc import Mapping
from datetime import date, datetime
from typing import Any, Literal
from uuid import UUID

from pydantic.alias_generators import to_snake

logger = logging.getLogger(__name__)

# Tokens larger than this are rejected before decoding
MAX_CURSOR_LENGTH = 8 * 1024

CursorDirection = Literal["next", "prev"]

_MISSING = object()


class CursorCodec:
    """Encode, decode and build pagination cursors.

    Usage:
        token = CursorCodec.from_row(entity, ["createdAt", "id"])
        data = CursorCodec.decode(token)
        if CursorCodec.is_valid(data):
            ...
    """

    @staticmethod
    def encode(data: dict[str, Any]) -> str | None:
        """Encode cursor data to an opaque string.

        Returns:
            URL-safe base64 string, or None if ``data`` is not a dict or
            cannot be serialized.
        """
        if not isinstance(data, dict):
            logger.warning(
                "Refusing to encode non-dict cursor payload",
                extra={"payload_type": type(data).__name__},
            )
            return None
        try:
            json_str = json.dumps(
                CursorCodec._serialize_values(data), separators=(",", ":")
            )
        except (TypeError, ValueError) as e:
            logger.warning("Failed to encode cursor", extra={"error": str(e)})
            return None
        return base64.urlsafe_b64encode(json_str.encode()).decode()

    @staticmethod
    def decode(cursor: str | None) -> dict[str, Any] | None:
        """Decode a cursor string to its payload.

        Returns:
            Payload dict, or None for empty, oversized, non-base64,
            non-JSON or non-object input.
        """
        if not cursor or not isinstance(cursor, str):
            return None
        if len(cursor) > MAX_CURSOR_LENGTH:
            logger.warning(
                "Rejected oversized cursor",
                extra={"length": len(cursor), "max_length": MAX_CURSOR_LENGTH},
            )
            return None
        try:
            raw = base64.urlsafe_b64decode(cursor.encode())
            payload = json.loads(raw.decode())
        except (binascii.Error, UnicodeError, ValueError) as e:
            logger.warning("Failed to decode cursor", extra={"error": str(e)})
            return None
        if not isinstance(payload, dict):
            logger.warning(
                "Cursor payload is not an object",
                extra={"payload_type": type(payload).__name__},
            )
            return None
        return payload

    @staticmethod
    def is_valid(decoded: Any) -> bool:
        """A usable cursor is a dict carrying a truthy ``id``."""
        return isinstance(decoded, dict) and bool(decoded.get("id"))

    @staticmethod
    def from_row(
        row: Any,
        sort_fields: list[str],
        direction: CursorDirection = "next",
    ) -> str | None:
        """Create a cursor from an entity, ORM instance or mapping.

        Each field is looked up by its given name first, then by its
        snake_case form, so ``"createdAt"`` resolves against both an
        entity's ``created_at`` attribute and a ``{"createdAt": ...}`` dict.

        Example:
            cursor = CursorCodec.from_row(icon, ["createdAt", "id"])
        """
        values: dict[str, Any] = {}
        for field in sort_fields:
            values[field] = CursorCodec._resolve(row, field)
        values["direction"] = direction
        return CursorCodec.encode(values)

    @staticmethod
    def _resolve(row: Any, field: str) -> Any:
        for name in (field, to_snake(field)):
            if isinstance(row, Mapping):
                value = row.get(name, _MISSING)
            else:
                value = getattr(row, name, _MISSING)
            if value is not _MISSING:
                return value
        return None

    @staticmethod
    def _serialize_values(values: dict[str, Any]) -> dict[str, Any]:
        """Serialize values to a JSON-compatible format."""
        result = {}
        for key, value in values.items():
            if isinstance(value, (datetime, date)):
                result[key] = value.isoformat()
            elif isinstance(value, UUID):
                result[key] = str(value)
            else:
                result[key] = value
        return result


__all__ = ["MAX_CURSOR_LENGTH", "CursorCodec", "CursorDirection"]
