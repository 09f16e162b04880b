"""Field encoding and projection for stored documents.

Records are flat JSON objects of string values. Nothing numeric or binary
is modelled: values are stringified on the way in and on the way out.
"""

from collections.abc import Iterable, Mapping
from typing import Any


def _to_text(value: Any) -> str:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8")
    return str(value)


def encode_values(values: Mapping[str, Any]) -> dict[str, str]:
    """Convert every field value to its string form for storage."""
    return {name: _to_text(value) for name, value in values.items()}


def extract_fields(
    content: Mapping[str, Any], fields: Iterable[str] | None = None
) -> dict[str, str]:
    """Project the requested fields out of a document.

    Args:
        content: Full document content.
        fields: Field names to keep. None or empty keeps every field.

    Returns:
        Mapping of field name to textual value. Requested fields that the
        document does not contain are left out.
    """
    if not fields:
        return {name: _to_text(value) for name, value in content.items()}
    return {name: _to_text(content[name]) for name in fields if name in content}
