"""Chart-data pipeline for Chart.js.

Filter specifications compile to backend predicates (`filters`), resource rows
transform into labels and datasets (`transform`), and `processor` ties the two
together behind a fail-soft boundary.
"""
