"""Transform flat records into Chart.js labels and datasets.

Labels are always strings and are ordered with plain string comparison. Date
labels are therefore formatted so that lexicographic order is chronological
order (`2025-01-31` < `2025-02-01`, `Week 2025-01-27` < `Week 2025-02-03`,
`2025-09` < `2025-10`).
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Any

from .fields import humanize_field, read_field
from .palette import border_colors, fill_colors
from .schema import ChartData, ChartDataset, ChartRequest, DateGrouping

NULL_LABEL = "(none)"


def format_date_label(value: date, date_grouping: DateGrouping | str) -> str:
    """Format a date according to the requested grouping.

    Args:
        value: Calendar date.
        date_grouping: One of day/week/month/year; anything else formats as day.

    Returns:
        `YYYY-MM-DD` (day), `Week YYYY-MM-DD` with the Monday of the week
        (week), `YYYY-MM` (month) or `YYYY` (year).
    """

    if date_grouping == "week":
        week_start = value - timedelta(days=value.weekday())
        return f"Week {week_start.isoformat()}"
    if date_grouping == "month":
        return f"{value.year:04d}-{value.month:02d}"
    if date_grouping == "year":
        return f"{value.year:04d}"
    return value.isoformat()


def format_label(value: object, request: ChartRequest) -> str:
    """Format an x-axis value as a chart label.

    Datetimes are truncated to their date, dates are bucketed by
    `request.date_grouping`, `None` becomes `NULL_LABEL`, and anything else is
    converted with `str()`.
    """

    if value is None:
        return NULL_LABEL
    if isinstance(value, datetime):
        return format_date_label(value.date(), request.date_grouping)
    if isinstance(value, date):
        return format_date_label(value, request.date_grouping)
    return str(value)


def chart_value(value: object) -> Any:
    """Coerce a y-axis value for the payload (`None` -> 0, Decimal -> float)."""

    if value is None:
        return 0
    if isinstance(value, Decimal):
        return float(value)
    return value


def transform_for_chart(rows: Iterable[object], request: ChartRequest) -> ChartData:
    """Transform records into chart data, grouped when `request.group_by` is set."""

    if request.group_by:
        return transform_grouped(rows, request)
    return transform_simple(rows, request)


def transform_simple(rows: Iterable[object], request: ChartRequest) -> ChartData:
    """Build a single dataset of `(label, value)` pairs sorted by label.

    Args:
        rows: Records to chart.
        request: Chart request providing x/y fields and date grouping.

    Returns:
        ChartData with exactly one dataset.
    """

    pairs = [
        (format_label(read_field(row, request.x_field), request), chart_value(read_field(row, request.y_field)))
        for row in rows
    ]
    pairs.sort(key=lambda pair: pair[0])
    labels = [label for label, _ in pairs]
    values = [value for _, value in pairs]
    dataset: ChartDataset = {
        "label": humanize_field(request.y_field),
        "data": values,
        "backgroundColor": fill_colors(len(values)),
        "borderColor": border_colors(len(values)),
        "borderWidth": 1,
    }
    return {"labels": labels, "datasets": [dataset]}


def transform_grouped(rows: Iterable[object], request: ChartRequest) -> ChartData:
    """Build one dataset per distinct `group_by` value.

    Groups keep first-encounter order. Every dataset is aligned to the global
    sorted label list; label/group combinations without a record are `0`.
    When a label repeats inside a group, the later record wins.

    Args:
        rows: Records to chart.
        request: Chart request with `group_by` set.

    Returns:
        ChartData with one dataset per group (none for an empty row set).
    """

    groups: dict[object, dict[str, Any]] = {}
    label_set: set[str] = set()
    for row in rows:
        group_key = read_field(row, request.group_by or "")
        label = format_label(read_field(row, request.x_field), request)
        label_set.add(label)
        groups.setdefault(group_key, {})[label] = chart_value(read_field(row, request.y_field))

    labels = sorted(label_set)
    datasets: list[ChartDataset] = []
    for offset, (group_key, values_by_label) in enumerate(groups.items()):
        datasets.append(
            {
                "label": NULL_LABEL if group_key is None else str(group_key),
                "data": [values_by_label.get(label, 0) for label in labels],
                "backgroundColor": fill_colors(len(labels), offset=offset),
                "borderColor": border_colors(len(labels), offset=offset),
                "borderWidth": 1,
            }
        )
    return {"labels": labels, "datasets": datasets}
