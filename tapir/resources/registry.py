"""Resolve chart resource handles into Resource instances."""

from __future__ import annotations

from collections.abc import Mapping

from django.apps import apps
from django.conf import settings
from django.db import models

from .base import Resource, ResourceError
from .memory import MemoryResource
from .orm import ModelResource


def resolve_resource(handle: object) -> Resource:
    """Turn a resource handle into a Resource.

    Accepted handles:

    - an object already implementing `Resource`,
    - a Django model class,
    - a model label such as `"catalog.Product"`,
    - a list/tuple of mappings (wrapped in a MemoryResource).

    Args:
        handle: Resource handle from the chart request.

    Returns:
        The resolved Resource.

    Raises:
        ResourceError: When the handle is of an unsupported type or names an
            unknown model.
    """

    if isinstance(handle, Resource):
        return handle
    if isinstance(handle, type) and issubclass(handle, models.Model):
        return ModelResource(handle)
    if isinstance(handle, str):
        try:
            model = apps.get_model(handle)
        except (LookupError, ValueError) as exc:
            raise ResourceError(f"Unknown resource {handle!r}.") from exc
        return ModelResource(model)
    if isinstance(handle, (list, tuple)) and all(isinstance(row, Mapping) for row in handle):
        return MemoryResource(handle)
    raise ResourceError(f"Unsupported resource handle: {handle!r}.")


def configured_resources() -> dict[str, str]:
    """Return the `TAPIR_CHART_RESOURCES` allowlist (name -> model label)."""

    return dict(getattr(settings, "TAPIR_CHART_RESOURCES", {}) or {})


def resolve_named_resource(name: str) -> Resource:
    """Resolve a resource exposed under `name` in `TAPIR_CHART_RESOURCES`.

    Raises:
        ResourceError: When `name` is not configured or its label is invalid.
    """

    label = configured_resources().get(name)
    if label is None:
        raise ResourceError(f"Resource {name!r} is not exposed for charts.")
    return resolve_resource(label)
