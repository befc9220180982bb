"""Field access and naming helpers shared by the filter and chart layers."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


def read_field(record: object, field: str) -> Any:
    """Read a field from a record.

    Records are either mappings (in-memory rows) or objects exposing fields as
    attributes (Django model instances). A missing field reads as `None`.

    Args:
        record: Mapping or attribute-bearing object.
        field: Field name to read.

    Returns:
        The field value, or None when the record has no such field.
    """

    if isinstance(record, Mapping):
        return record.get(field)
    return getattr(record, field, None)


def humanize_field(field: object) -> str:
    """Convert a field name into a human-readable label.

    Args:
        field: Field name such as `total_amount`.

    Returns:
        Title-cased words joined by single spaces, e.g. "Total Amount".
    """

    words = str(field).replace("_", " ").split()
    return " ".join(word.capitalize() for word in words)
