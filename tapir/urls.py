"""URL configuration for chart data endpoints."""

from __future__ import annotations

from django.urls import path

from tapir import views

app_name = "tapir"

urlpatterns = [
    path("charts/<slug:name>/data/", views.chart_data, name="chart_data"),
]
