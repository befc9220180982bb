"""Django app configuration for the example catalog."""

from __future__ import annotations

from django.apps import AppConfig


class CatalogConfig(AppConfig):
    """AppConfig for the example catalog resources."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "catalog"
