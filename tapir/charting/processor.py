"""Fetch resource rows and turn them into chart data.

`process_data` is the boundary used by views and templates. It never raises:
resource resolution errors, query failures, malformed parameters and transform
errors are logged and collapsed into `get_empty_chart_data()`, so a bad chart
request renders an empty chart instead of breaking the page.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from tapir.resources import execute, new_query, resolve_resource

from .filters import FilterCompiler
from .params import decode_chart_request
from .schema import ChartData, ChartRequest
from .transform import transform_for_chart

logger = logging.getLogger(__name__)


def get_empty_chart_data() -> ChartData:
    """Return the chart payload rendered when no data is available."""

    return {
        "labels": [],
        "datasets": [
            {
                "label": "No Data",
                "data": [],
                "backgroundColor": [],
                "borderColor": [],
                "borderWidth": 1,
            }
        ],
    }


def fetch_rows(request: ChartRequest) -> object:
    """Build and execute the query described by `request`.

    Steps: resolve the resource, load relationships, apply the compiled
    filter, then sort.

    Returns:
        The backend result (a list of records for every built-in backend).

    Raises:
        ResourceError: When the resource handle cannot be resolved.
        QueryError: When the backend fails to execute the query.
    """

    resource = resolve_resource(request.resource)
    params = request.query_params
    query = new_query(resource)
    if params.load:
        query = query.load(params.load)
    compiler = FilterCompiler(resource.capabilities)
    query = query.filter(compiler.compile(params.filter))
    if params.sort:
        query = query.sort(params.sort)
    return execute(query)


def process_data(params: ChartRequest | Mapping[str, Any]) -> ChartData:
    """Resolve, query and transform a chart request.

    Args:
        params: A ChartRequest, or raw chart attributes accepted by
            `decode_chart_request`.

    Returns:
        ChartData for the request, or `get_empty_chart_data()` on any failure
        or when the backend result is not a list.
    """

    try:
        request = params if isinstance(params, ChartRequest) else decode_chart_request(params)
        rows = fetch_rows(request)
        if not isinstance(rows, list):
            logger.warning("Chart resource %r returned %s, not a list.", request.resource, type(rows).__name__)
            return get_empty_chart_data()
        return transform_for_chart(rows, request)
    except Exception:
        logger.warning("Chart data request failed; rendering an empty chart.", exc_info=True)
        return get_empty_chart_data()


def fetch_chart_data(resource: object, **options: Any) -> ChartData:
    """Chart `resource` with keyword chart attributes.

    Same as `process_data`, except that a payload without any dataset (a
    grouped request over zero rows) is also replaced by the empty chart.

    Example:
        fetch_chart_data(Product, x_field="category", y_field="stock_count")
    """

    chart_data = process_data({**options, "resource": resource})
    if not chart_data["labels"] and not chart_data["datasets"]:
        return get_empty_chart_data()
    return chart_data
