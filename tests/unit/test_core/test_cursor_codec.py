"""Tests for the pagination cursor codec."""

from __future__ import annotations

import base64
import json
from datetime import UTC, datetime
from types import SimpleNamespace
from uuid import UUID

from catalog_service.core.pagination import MAX_CURSOR_LENGTH, CursorCodec


def _raw(payload: object) -> str:
    return base64.urlsafe_b64encode(json.dumps(payload).encode()).decode()


class TestEncodeDecode:
    """encode()/decode() behaviour."""

    def test_decode_restores_payload(self):
        """A cursor decodes to the dict it was built from."""
        cursor = CursorCodec.encode({"createdAt": "2025-01-01T00:00:00", "id": 7})
        assert CursorCodec.decode(cursor) == {"createdAt": "2025-01-01T00:00:00", "id": 7}

    def test_encode_is_urlsafe_compact_json(self):
        """Payload is compact JSON in URL-safe base64."""
        cursor = CursorCodec.encode({"id": 1, "name": "a b"})
        assert "+" not in cursor and "/" not in cursor
        assert base64.urlsafe_b64decode(cursor).decode() == '{"id":1,"name":"a b"}'

    def test_encode_serializes_datetimes_and_uuids(self):
        """Datetimes become ISO strings and UUIDs plain strings."""
        moment = datetime(2025, 1, 15, 10, 30, tzinfo=UTC)
        uid = UUID("12345678-1234-5678-1234-567812345678")
        decoded = CursorCodec.decode(CursorCodec.encode({"createdAt": moment, "id": uid}))
        assert decoded == {"createdAt": moment.isoformat(), "id": str(uid)}

    def test_encode_rejects_non_dict(self):
        """Lists and scalars cannot be encoded."""
        assert CursorCodec.encode([1, 2]) is None
        assert CursorCodec.encode("id") is None

    def test_encode_unserializable_value_returns_none(self):
        """Values json cannot handle yield None instead of raising."""
        assert CursorCodec.encode({"id": 1, "blob": object()}) is None

    def test_decode_empty_and_non_string(self):
        """Empty or non-string input decodes to None."""
        assert CursorCodec.decode(None) is None
        assert CursorCodec.decode("") is None
        assert CursorCodec.decode(123) is None  # type: ignore[arg-type]

    def test_decode_garbage(self):
        """Invalid base64 or JSON decodes to None."""
        assert CursorCodec.decode("!!!not-base64!!!") is None
        assert CursorCodec.decode(base64.urlsafe_b64encode(b"{not json").decode()) is None
        assert CursorCodec.decode(base64.urlsafe_b64encode(b"\xff\xfe").decode()) is None

    def test_decode_non_object_payload(self):
        """JSON arrays and scalars are not cursors."""
        assert CursorCodec.decode(_raw([1, 2, 3])) is None
        assert CursorCodec.decode(_raw(42)) is None

    def test_decode_rejects_oversized_token(self):
        """Tokens over the size limit are refused without decoding."""
        assert CursorCodec.decode("a" * (MAX_CURSOR_LENGTH + 1)) is None


class TestIsValid:
    """is_valid() requires a dict with a truthy id."""

    def test_valid(self):
        assert CursorCodec.is_valid({"id": 3, "createdAt": "x"})

    def test_missing_or_falsy_id(self):
        assert not CursorCodec.is_valid({"createdAt": "x"})
        assert not CursorCodec.is_valid({"id": 0})
        assert not CursorCodec.is_valid({"id": None})

    def test_not_a_dict(self):
        assert not CursorCodec.is_valid(None)
        assert not CursorCodec.is_valid([{"id": 1}])


class TestFromRow:
    """from_row() resolves camelCase fields against rows and mappings."""

    def test_attribute_lookup_falls_back_to_snake_case(self):
        """``createdAt`` reads ``created_at`` from an object."""
        moment = datetime(2025, 3, 1, 12, 0, tzinfo=UTC)
        row = SimpleNamespace(id=5, created_at=moment)

        decoded = CursorCodec.decode(CursorCodec.from_row(row, ["createdAt", "id"]))

        assert decoded == {"createdAt": moment.isoformat(), "id": 5, "direction": "next"}

    def test_mapping_lookup_prefers_given_name(self):
        """Mappings are read by the given key first."""
        row = {"id": 9, "popularity": 40, "pop": 1}
        decoded = CursorCodec.decode(CursorCodec.from_row(row, ["popularity", "id"]))
        assert decoded["popularity"] == 40
        assert decoded["id"] == 9

    def test_missing_field_is_null(self):
        """Unknown fields are encoded as null."""
        decoded = CursorCodec.decode(CursorCodec.from_row({"id": 1}, ["createdAt", "id"]))
        assert decoded["createdAt"] is None

    def test_direction_is_recorded(self):
        decoded = CursorCodec.decode(CursorCodec.from_row({"id": 1}, ["id"], direction="prev"))
        assert decoded["direction"] == "prev"
