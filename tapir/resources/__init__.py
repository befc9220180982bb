"""Queryable chart resources (Django models and in-memory tables)."""

from .base import ChartDataError, Query, QueryError, Resource, ResourceError, execute, new_query
from .memory import MemoryResource
from .orm import ModelResource
from .registry import resolve_named_resource, resolve_resource

__all__ = [
    "ChartDataError",
    "MemoryResource",
    "ModelResource",
    "Query",
    "QueryError",
    "Resource",
    "ResourceError",
    "execute",
    "new_query",
    "resolve_named_resource",
    "resolve_resource",
]
