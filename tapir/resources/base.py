"""Query primitives shared by every chart resource backend.

A resource is anything that can answer a `Query`: a Django model, or an
in-memory table. Queries are immutable; `load`, `filter` and `sort` each return
a new query, and only `execute` touches the backend.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any, Protocol, runtime_checkable

from tapir.charting.filters import BackendCapabilities, Predicate


class ChartDataError(Exception):
    """Base class for errors raised while fetching chart rows."""


class ResourceError(ChartDataError):
    """Raised when a resource handle cannot be resolved or read."""


class QueryError(ChartDataError):
    """Raised when a backend fails to execute a query."""


@runtime_checkable
class Resource(Protocol):
    """A queryable source of chart records."""

    name: str
    capabilities: BackendCapabilities

    def run(self, query: Query) -> list[Any]:
        """Execute `query` and return the matching records."""


def _as_names(value: object) -> list[object]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def normalize_load(spec: object) -> tuple[str, ...]:
    """Normalize a relationship load specification into `__`-joined paths.

    Accepted shapes: a single name, a sequence of names and mappings, or a
    mapping of relationship name to a nested load specification.

    Args:
        spec: Load specification.

    Returns:
        Relationship paths in declaration order, e.g. `("reviews", "reviews__author")`.
    """

    paths: list[str] = []
    if isinstance(spec, Mapping):
        for name, nested in spec.items():
            paths.append(str(name))
            paths.extend(f"{name}__{path}" for path in normalize_load(nested))
        return tuple(paths)
    for entry in _as_names(spec):
        if isinstance(entry, Mapping):
            paths.extend(normalize_load(entry))
        else:
            paths.append(str(entry))
    return tuple(paths)


def normalize_sort(spec: object) -> tuple[str, ...]:
    """Normalize a sort specification (a field or a sequence of fields)."""

    return tuple(str(field) for field in _as_names(spec))


@dataclass(frozen=True, slots=True)
class Query:
    """An unexecuted read against a resource.

    Args:
        resource: Target resource.
        loads: Relationship paths to load alongside each record.
        predicate: Conjunction of every filter applied so far.
        sort_fields: Sort fields in priority order; `-field` sorts descending.
    """

    resource: Resource
    loads: tuple[str, ...] = ()
    predicate: Predicate = Predicate()
    sort_fields: tuple[str, ...] = ()

    def load(self, spec: object) -> Query:
        """Return a query that also loads the relationships in `spec`."""

        return replace(self, loads=self.loads + normalize_load(spec))

    def filter(self, predicate: Predicate) -> Query:
        """Return a query narrowed by `predicate`."""

        return replace(self, predicate=self.predicate & predicate)

    def sort(self, spec: object) -> Query:
        """Return a query sorted by the fields in `spec` after existing sorts."""

        return replace(self, sort_fields=self.sort_fields + normalize_sort(spec))


def new_query(resource: Resource) -> Query:
    """Start an unconstrained query against `resource`."""

    return Query(resource=resource)


def execute(query: Query) -> list[Any]:
    """Run `query` against its resource.

    Raises:
        QueryError: When the backend rejects or fails the query.
    """

    return query.resource.run(query)
