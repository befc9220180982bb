"""Django ORM resource backend."""

from __future__ import annotations

from django.core.exceptions import FieldDoesNotExist, FieldError, ValidationError
from django.db import DatabaseError, models

from tapir.charting.filters import SQL_CAPABILITIES, BackendCapabilities

from .base import Query, QueryError


class ModelResource:
    """A resource that reads model instances through the default manager.

    Filters are pushed into SQL via `Predicate.to_q()`, relationship loads
    become `prefetch_related` paths and sorts become `order_by` fields.

    Args:
        model: Django model class to query.
        capabilities: Backend capability descriptor (SQL backends support
            pattern matching and case folding).
    """

    def __init__(
        self,
        model: type[models.Model],
        *,
        capabilities: BackendCapabilities = SQL_CAPABILITIES,
    ) -> None:
        self.model = model
        self.name = model._meta.label
        self.capabilities = capabilities

    def __repr__(self) -> str:
        return f"ModelResource({self.name})"

    def queryset(self, query: Query) -> models.QuerySet:
        """Build the (lazy) queryset for `query`."""

        queryset = self.model._default_manager.all()
        if query.loads:
            queryset = queryset.prefetch_related(*query.loads)
        if not query.predicate.is_identity:
            queryset = queryset.filter(query.predicate.to_q())
        if query.sort_fields:
            queryset = queryset.order_by(*query.sort_fields)
        return queryset

    def run(self, query: Query) -> list[models.Model]:
        """Evaluate `query` and return model instances."""

        try:
            return list(self.queryset(query))
        except (
            AttributeError,
            DatabaseError,
            FieldDoesNotExist,
            FieldError,
            TypeError,
            ValidationError,
            ValueError,
        ) as exc:
            raise QueryError(f"{self.name}: {exc}") from exc
