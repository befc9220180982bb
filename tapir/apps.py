"""App configuration for the tapir charting app."""

from __future__ import annotations

from django.apps import AppConfig


class TapirConfig(AppConfig):
    """Configuration for the `tapir` app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "tapir"
