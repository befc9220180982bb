"""URL configuration for the tapir chart-data site."""

from __future__ import annotations

from django.urls import include, path

urlpatterns = [
    path("", include("tapir.urls")),
]
