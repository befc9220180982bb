"""Decode loosely-typed chart attributes into a `ChartRequest`.

Chart attributes arrive from templates, query strings or JSON bodies, so
values may be strings where numbers or booleans are expected. Decoding is
strict about the mandatory fields and the declared enumerations, and lenient
about display-only values.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any, cast

from .schema import (
    AGGREGATE_FUNCTIONS,
    CHART_TYPES,
    DATE_GROUPINGS,
    AggregateFunction,
    ChartRequest,
    ChartType,
    DateGrouping,
    QueryParams,
)


def decode_chart_request(payload: Mapping[str, Any]) -> ChartRequest:
    """Decode chart attributes into a ChartRequest.

    Args:
        payload: Attribute mapping with at least `resource`, `x_field` and `y_field`.

    Returns:
        ChartRequest instance.

    Raises:
        ValueError: When mandatory attributes are missing or an enumerated
            attribute has an unsupported value.
    """

    resource = payload.get("resource")
    if resource is None:
        raise ValueError("Chart attribute 'resource' is required.")

    x_field = _required_name(payload, "x_field")
    y_field = _required_name(payload, "y_field")

    chart_type = str(payload.get("chart_type") or "bar")
    if chart_type not in CHART_TYPES:
        raise ValueError(f"Unsupported chart_type: {chart_type!r}.")

    aggregate_function = str(payload.get("aggregate_function") or "count")
    if aggregate_function not in AGGREGATE_FUNCTIONS:
        raise ValueError(f"Unsupported aggregate_function: {aggregate_function!r}.")

    # Unknown date groupings label like `day`.
    date_grouping = str(payload.get("date_grouping") or "day")
    if date_grouping not in DATE_GROUPINGS:
        date_grouping = "day"

    group_by = payload.get("group_by")
    css_class = payload.get("css_class", payload.get("class"))

    return ChartRequest(
        resource=resource,
        x_field=x_field,
        y_field=y_field,
        group_by=str(group_by) if group_by else None,
        query_params=decode_query_params(payload.get("query_params")),
        aggregate_function=cast(AggregateFunction, aggregate_function),
        date_grouping=cast(DateGrouping, date_grouping),
        chart_type=cast(ChartType, chart_type),
        title=str(payload.get("title") or ""),
        width=_parse_int(payload.get("width"), default=400),
        height=_parse_int(payload.get("height"), default=300),
        colors=_parse_colors(payload.get("colors")),
        responsive=_parse_bool(payload.get("responsive"), default=True),
        css_class=str(css_class or ""),
    )


def decode_query_params(raw: object) -> QueryParams:
    """Decode the `query_params` attribute.

    Raises:
        ValueError: When `raw` is neither empty, a mapping, nor a QueryParams.
    """

    if raw is None:
        return QueryParams()
    if isinstance(raw, QueryParams):
        return raw
    if not isinstance(raw, Mapping):
        raise ValueError(f"query_params must be a mapping, got {type(raw).__name__}.")
    return QueryParams(filter=raw.get("filter"), sort=raw.get("sort"), load=raw.get("load"))


def _required_name(payload: Mapping[str, Any], key: str) -> str:
    value = payload.get(key)
    if value is None or not str(value).strip():
        raise ValueError(f"Chart attribute {key!r} is required.")
    return str(value).strip()


def _parse_int(value: object, *, default: int) -> int:
    if value is None or value == "":
        return default
    try:
        return int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Expected an integer, got {value!r}.") from exc


def _parse_bool(value: object, *, default: bool) -> bool:
    if value is None or value == "":
        return default
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "t", "yes", "y", "on"}
    return bool(value)


def _parse_colors(value: object) -> tuple[str, ...] | None:
    if not value:
        return None
    if isinstance(value, str):
        if not value.lstrip().startswith("["):
            return (value.strip(),)
        try:
            value = json.loads(value)
        except json.JSONDecodeError as exc:
            raise ValueError(f"colors is not valid JSON: {exc}") from exc
    if isinstance(value, (list, tuple)):
        return tuple(str(color) for color in value)
    raise ValueError(f"colors must be a list of CSS colors, got {value!r}.")
