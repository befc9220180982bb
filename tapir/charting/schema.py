"""Schema types for chart-data requests and Chart.js payloads.

`ChartRequest` carries everything needed to turn a resource into chart data.
`ChartData` is the wire contract consumed by Chart.js; its key names must not
change.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, TypedDict

ChartType = Literal["bar", "line", "pie", "doughnut", "radar"]

AggregateFunction = Literal["count", "sum", "avg", "min", "max"]

DateGrouping = Literal["day", "week", "month", "year"]

CHART_TYPES: frozenset[str] = frozenset({"bar", "line", "pie", "doughnut", "radar"})
AGGREGATE_FUNCTIONS: frozenset[str] = frozenset({"count", "sum", "avg", "min", "max"})
DATE_GROUPINGS: frozenset[str] = frozenset({"day", "week", "month", "year"})


class ChartDataset(TypedDict):
    """A Chart.js dataset payload."""

    label: str
    data: list[Any]
    backgroundColor: list[str]
    borderColor: list[str]
    borderWidth: int


class ChartData(TypedDict):
    """The full Chart.js payload (labels + datasets)."""

    labels: list[str]
    datasets: list[ChartDataset]


@dataclass(frozen=True, slots=True)
class QueryParams:
    """Optional query shaping applied before rows are charted.

    Args:
        filter: Filter specification (see `tapir.charting.filters`).
        sort: A field or a sequence of fields.
        load: A relationship, a sequence of relationships, or a nested mapping.
    """

    filter: Any = None
    sort: Any = None
    load: Any = None


@dataclass(frozen=True, slots=True)
class ChartRequest:
    """A request to chart one resource.

    Args:
        resource: Resource handle (model class, model label, Resource, or rows).
        x_field: Field providing the labels.
        y_field: Field providing the values.
        group_by: Optional field splitting rows into one dataset per value.
        query_params: Optional filter/sort/load shaping.
        aggregate_function: Declared aggregation; accepted but not applied.
        date_grouping: Bucket used when x values are dates or datetimes.
        chart_type: Display-only chart type.
        title: Display-only chart title.
        width: Display-only canvas width in pixels.
        height: Display-only canvas height in pixels.
        colors: Optional CSS colors overriding the palette at render time.
        responsive: Display-only responsiveness flag.
        css_class: Extra CSS classes for the chart container.
    """

    resource: Any
    x_field: str
    y_field: str
    group_by: str | None = None
    query_params: QueryParams = field(default_factory=QueryParams)
    aggregate_function: AggregateFunction = "count"
    date_grouping: DateGrouping = "day"
    chart_type: ChartType = "bar"
    title: str = ""
    width: int = 400
    height: int = 300
    colors: tuple[str, ...] | None = None
    responsive: bool = True
    css_class: str = ""
