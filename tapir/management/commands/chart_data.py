"""Print the Chart.js data payload for a resource."""

from __future__ import annotations

import json

from django.core.management.base import BaseCommand, CommandError
from django.core.serializers.json import DjangoJSONEncoder

from tapir.charting.params import decode_chart_request
from tapir.charting.processor import process_data
from tapir.resources import ResourceError, resolve_resource


class Command(BaseCommand):
    """Query a model and print its chart data as JSON."""

    help = "Print chart data (labels + datasets) for a model, e.g. `chart_data catalog.Product`."

    def add_arguments(self, parser) -> None:
        """Add command arguments."""

        parser.add_argument("resource", help="Model label, e.g. catalog.Product.")
        parser.add_argument("--x-field", required=True, help="Field used for labels.")
        parser.add_argument("--y-field", required=True, help="Field used for values.")
        parser.add_argument("--group-by", default=None, help="Optional field splitting datasets.")
        parser.add_argument(
            "--date-grouping",
            default="day",
            choices=["day", "week", "month", "year"],
            help="Bucket for date labels (default: day).",
        )
        parser.add_argument("--filter", default=None, help="JSON filter specification.")
        parser.add_argument("--sort", action="append", default=None, help="Sort field (repeatable).")
        parser.add_argument("--load", action="append", default=None, help="Relationship to load (repeatable).")

    def handle(self, *args, **options) -> str | None:
        """Run the command."""

        try:
            resource = resolve_resource(options["resource"])
        except ResourceError as exc:
            raise CommandError(str(exc)) from exc

        try:
            filter_spec = json.loads(options["filter"]) if options["filter"] else None
            chart_request = decode_chart_request(
                {
                    "resource": resource,
                    "x_field": options["x_field"],
                    "y_field": options["y_field"],
                    "group_by": options["group_by"],
                    "date_grouping": options["date_grouping"],
                    "query_params": {
                        "filter": filter_spec,
                        "sort": options["sort"],
                        "load": options["load"],
                    },
                }
            )
        except ValueError as exc:
            raise CommandError(f"Invalid chart options: {exc}") from exc

        data = process_data(chart_request)
        self.stdout.write(json.dumps(data, cls=DjangoJSONEncoder, indent=2))
        return None
