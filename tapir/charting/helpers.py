"""Convenience helpers for building Chart.js payloads and configs."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from .fields import humanize_field, read_field
from .palette import BORDER_ALPHA, FILL_ALPHA, generate_colors
from .schema import ChartData
from .transform import chart_value

CIRCULAR_CHART_TYPES = frozenset({"pie", "doughnut"})


def transform_data_for_chart(
    rows: Iterable[object],
    *,
    label_field: str = "name",
    value_field: str = "count",
) -> ChartData:
    """Project already-aggregated rows into a single-dataset payload.

    Unlike `transform_simple`, rows keep their input order and labels are
    plain `str()` values (no date bucketing).

    Args:
        rows: Records, e.g. the result of a `.values().annotate()` queryset.
        label_field: Field providing the labels.
        value_field: Field providing the values.

    Returns:
        ChartData with one dataset.
    """

    labels: list[str] = []
    values: list[Any] = []
    for row in rows:
        labels.append(str(read_field(row, label_field)))
        values.append(chart_value(read_field(row, value_field)))
    return {
        "labels": labels,
        "datasets": [
            {
                "label": humanize_field(value_field),
                "data": values,
                "backgroundColor": generate_colors(len(values), FILL_ALPHA),
                "borderColor": generate_colors(len(values), BORDER_ALPHA),
                "borderWidth": 1,
            }
        ],
    }


def legend_position(chart_type: str) -> str:
    """Return the legend position for a chart type."""

    return "right" if chart_type in CIRCULAR_CHART_TYPES else "top"


def chart_config(chart_type: str, data: ChartData, *, title: str = "", responsive: bool = True) -> dict[str, Any]:
    """Build a complete Chart.js configuration object.

    Args:
        chart_type: Chart.js chart type.
        data: ChartData payload.
        title: Optional title; the title plugin is hidden when empty.
        responsive: Whether the chart resizes with its container.

    Returns:
        Dict with `type`, `data` and `options`; non-circular charts also get
        x/y scales with a zero-based y axis.
    """

    options: dict[str, Any] = {
        "responsive": responsive,
        "maintainAspectRatio": not responsive,
        "plugins": {
            "title": {
                "display": title != "",
                "text": title,
                "font": {"size": 16, "weight": "bold"},
            },
            "legend": {
                "display": True,
                "position": legend_position(chart_type),
            },
        },
    }
    if chart_type not in CIRCULAR_CHART_TYPES:
        options["scales"] = {
            "x": {"display": True, "grid": {"display": True}},
            "y": {"display": True, "grid": {"display": True}, "beginAtZero": True},
        }
    return {"type": chart_type, "data": data, "options": options}
