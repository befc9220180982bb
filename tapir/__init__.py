"""Chart data from Django resources.

The `charting` package holds the filter compiler, chart transformer and data
processor; `resources` holds the queryable backends they read from.
"""
