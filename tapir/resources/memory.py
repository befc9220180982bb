"""In-memory table resource.

The in-memory backend is the capability-limited counterpart of the ORM
backend: it evaluates predicates record by record and has no pattern matching,
so string operators compile to their `contains` fallbacks.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import Any

from tapir.charting.fields import read_field
from tapir.charting.filters import MEMORY_CAPABILITIES, BackendCapabilities

from .base import Query, QueryError, ResourceError

RelationshipLoader = Callable[[Mapping[str, Any]], Any]


class MemoryResource:
    """A resource backed by a list of mapping records.

    Args:
        rows: Source records; each must be a mapping.
        name: Display name used in logs.
        relationships: Optional loaders keyed by relationship name. Loading a
            relationship stores `loader(row)` under that name on each result row.
        capabilities: Backend capability descriptor.
    """

    def __init__(
        self,
        rows: Iterable[Mapping[str, Any]],
        *,
        name: str = "memory",
        relationships: Mapping[str, RelationshipLoader] | None = None,
        capabilities: BackendCapabilities = MEMORY_CAPABILITIES,
    ) -> None:
        self.name = name
        self.capabilities = capabilities
        self.relationships = dict(relationships or {})
        records: list[dict[str, Any]] = []
        for row in rows:
            if not isinstance(row, Mapping):
                raise ResourceError(f"{name}: records must be mappings, got {type(row).__name__}.")
            records.append(dict(row))
        self._rows = tuple(records)

    def __repr__(self) -> str:
        return f"MemoryResource(name={self.name!r}, rows={len(self._rows)})"

    def run(self, query: Query) -> list[dict[str, Any]]:
        """Filter, load and sort a copy of the table."""

        unknown = [path for path in query.loads if path not in self.relationships]
        if unknown:
            raise QueryError(f"{self.name}: unknown relationship(s) {', '.join(unknown)}.")

        try:
            rows = [dict(row) for row in self._rows if query.predicate.matches(row)]
        except TypeError as exc:
            raise QueryError(f"{self.name}: filter cannot be evaluated ({exc}).") from exc
        for path in query.loads:
            loader = self.relationships[path]
            for row in rows:
                row[path] = loader(row)

        try:
            return _sorted_rows(rows, query.sort_fields)
        except TypeError as exc:
            raise QueryError(f"{self.name}: cannot sort by {', '.join(query.sort_fields)}.") from exc


def _sorted_rows(rows: list[dict[str, Any]], sort_fields: tuple[str, ...]) -> list[dict[str, Any]]:
    # Stable sorts applied from the lowest priority field up.
    for field in reversed(sort_fields):
        descending = field.startswith("-")
        name = field.lstrip("-")
        rows = sorted(
            rows,
            key=lambda row: (read_field(row, name) is None, read_field(row, name)),
            reverse=descending,
        )
    return rows
