"""JSON endpoints serving Chart.js configs for exposed resources."""

from __future__ import annotations

import json
import logging

from django.http import HttpRequest, JsonResponse
from django.views.decorators.http import require_GET

from tapir.charting.helpers import chart_config
from tapir.charting.params import decode_chart_request
from tapir.charting.processor import process_data
from tapir.resources import ResourceError, resolve_named_resource

logger = logging.getLogger(__name__)

_ATTRIBUTE_KEYS = (
    "x_field",
    "y_field",
    "group_by",
    "aggregate_function",
    "date_grouping",
    "chart_type",
    "title",
    "responsive",
    "colors",
)


@require_GET
def chart_data(request: HttpRequest, name: str) -> JsonResponse:
    """Return the Chart.js config for the resource exposed as `name`.

    Query string: the chart attributes listed in `_ATTRIBUTE_KEYS` plus an
    optional JSON-encoded `query_params` object (`filter`, `sort`, `load`).
    """

    try:
        resource = resolve_named_resource(name)
    except ResourceError as exc:
        return JsonResponse({"ok": False, "error": str(exc)}, status=404)

    attributes: dict[str, object] = {key: request.GET.get(key) for key in _ATTRIBUTE_KEYS if key in request.GET}
    raw_query_params = request.GET.get("query_params")
    try:
        if raw_query_params:
            attributes["query_params"] = json.loads(raw_query_params)
        chart_request = decode_chart_request({**attributes, "resource": resource})
    except ValueError as exc:
        logger.info("Rejected chart request for %s: %s", name, exc)
        return JsonResponse({"ok": False, "error": str(exc)}, status=400)

    data = process_data(chart_request)
    return JsonResponse(
        {
            "ok": True,
            "chart": chart_config(
                chart_request.chart_type,
                data,
                title=chart_request.title,
                responsive=chart_request.responsive,
            ),
            "colors": list(chart_request.colors) if chart_request.colors else None,
        }
    )
