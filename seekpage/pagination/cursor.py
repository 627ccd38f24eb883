"""Opaque cursor tokens for keyset pagination.

A cursor is the ordered mapping of sort-column name to value taken from a
boundary record. On the wire it is compact UTF-8 JSON, base64url-encoded
without ``=`` padding, so ``{"id": 1}`` becomes ``eyJpZCI6MX0``.
"""

import base64
import json
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Union

import jsonschema
from pydantic import BaseModel, Field, field_serializer, field_validator
from pydantic_core import to_jsonable_python

from ..errors.exceptions import InvalidCursorError


CursorValue = Union[bool, int, float, str, None]

# Decoded payloads must at least be JSON objects
CURSOR_PAYLOAD_SCHEMA = {"type": "object"}

SCALAR_TYPES = ["string", "number", "integer", "boolean", "null"]


def _reject_constant(name: str):
    raise ValueError(f"Non-finite number {name} is not allowed")


def read_field(record: Any, column: str) -> Any:
    """Read a named field from a mapping row or an attribute-style record."""
    if isinstance(record, Mapping):
        return record[column]
    return getattr(record, column)


class Cursor(BaseModel, frozen=True):
    """Boundary position in an ordered result set."""

    values: Mapping[str, Any] = Field(
        default_factory=dict,
        validate_default=True,
        description="Column name to sort-key value"
    )

    @field_validator("values", mode="after")
    @classmethod
    def freeze_values(cls, v):
        """Store values as a read-only mapping."""
        return MappingProxyType(dict(v))

    @field_serializer("values")
    def serialize_values(self, v) -> Dict[str, Any]:
        return dict(v)

    def __getitem__(self, column: str) -> Any:
        return self.values[column]

    def __contains__(self, column: str) -> bool:
        return column in self.values

    @classmethod
    def from_record(cls, record: Any, columns: Iterable[str]) -> "Cursor":
        """Capture the sort-key values of ``record`` for ``columns``, in order.

        Values are normalised to JSON scalars (datetimes become ISO 8601
        strings, UUIDs and Decimals become strings).
        """
        return cls(values={
            column: to_jsonable_python(read_field(record, column))
            for column in columns
        })

    def encode(self) -> str:
        """Encode to a URL-safe base64 token without padding.

        Raises:
            ValueError: If a value cannot be represented as JSON
        """
        try:
            cursor_json = json.dumps(
                dict(self.values),
                separators=(",", ":"),
                ensure_ascii=False,
                allow_nan=False
            )
        except (TypeError, ValueError) as e:
            raise ValueError(f"Failed to encode cursor: {e}")

        encoded = base64.urlsafe_b64encode(cursor_json.encode("utf-8"))
        return encoded.decode("ascii").rstrip("=")

    @classmethod
    def decode(cls, token: str) -> "Cursor":
        """Decode a token produced by ``encode``.

        Raises:
            InvalidCursorError: If the token is not base64url, not UTF-8 JSON,
                or not a JSON object
        """
        try:
            if "+" in token or "/" in token:
                raise ValueError("token uses the standard base64 alphabet")
            padded = token + "=" * (-len(token) % 4)
            cursor_bytes = base64.b64decode(padded, altchars=b"-_", validate=True)
            payload = json.loads(cursor_bytes.decode("utf-8"), parse_constant=_reject_constant)
            jsonschema.validate(payload, CURSOR_PAYLOAD_SCHEMA)
        except jsonschema.ValidationError as e:
            raise InvalidCursorError(f"Invalid cursor format: {e.message}")
        except (TypeError, ValueError) as e:
            # binascii.Error, UnicodeDecodeError and JSONDecodeError are ValueErrors
            raise InvalidCursorError(f"Invalid cursor format: {e}")

        return cls(values=payload)

    def require(self, columns: List[str]) -> "Cursor":
        """Check that every order column is present with a scalar value.

        Extra keys are allowed. Returns the cursor itself for chaining.

        Raises:
            InvalidCursorError: If a column is missing or holds a non-scalar
        """
        schema = {
            "type": "object",
            "required": list(columns),
            "properties": {column: {"type": SCALAR_TYPES} for column in columns}
        }
        try:
            jsonschema.validate(dict(self.values), schema)
        except jsonschema.ValidationError as e:
            raise InvalidCursorError(f"Cursor does not match the active order: {e.message}")
        return self
