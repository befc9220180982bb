"""Unit tests for compiling filter specifications into predicates."""

from __future__ import annotations

import pytest
from django.db.models import Q

from tapir.charting.filters import (
    MEMORY_CAPABILITIES,
    SQL_CAPABILITIES,
    BackendCapabilities,
    Condition,
    FilterCompiler,
    FilterOperator,
    ListFilter,
    OperatorFilter,
    Predicate,
    ScalarFilter,
    compile_filter,
    like_condition,
    parse_filter_value,
)

pytestmark = pytest.mark.unit


def _names(rows, predicate: Predicate) -> list[str]:
    return [row["name"] for row in rows if predicate(row)]


def test_none_and_empty_specs_compile_to_identity() -> None:
    """No filter means no constraint."""

    compiler = FilterCompiler(SQL_CAPABILITIES)
    assert compiler.compile(None).is_identity
    assert compiler.compile({}).is_identity
    assert compiler.compile([]).is_identity
    assert compiler.compile(None).to_q() == Q()


def test_scalar_mapping_is_an_and_of_equalities(product_rows) -> None:
    """Scalar leaves compile to one exact condition per field."""

    predicate = compile_filter({"status": "active", "category": "electronics"})

    assert predicate.conditions == (
        Condition("status", "exact", "active"),
        Condition("category", "exact", "electronics"),
    )
    expected = [
        row["name"] for row in product_rows if row["status"] == "active" and row["category"] == "electronics"
    ]
    assert _names(product_rows, predicate) == expected


def test_sequence_of_maps_matches_single_map(product_rows) -> None:
    """The list-of-mappings form conjoins exactly like one merged mapping."""

    listed = compile_filter([{"status": "active"}, {"category": "electronics"}], MEMORY_CAPABILITIES)
    merged = compile_filter({"status": "active", "category": "electronics"}, MEMORY_CAPABILITIES)

    assert listed == merged
    assert _names(product_rows, listed) == ["Laptop Pro", "Gaming Mouse", "Wireless Headphones"]


def test_list_leaf_is_membership(product_rows) -> None:
    """A sequence value means the field must equal one of the elements."""

    predicate = compile_filter({"category": ["furniture"]}, MEMORY_CAPABILITIES)

    assert predicate.conditions == (Condition("category", "in", ("furniture",)),)
    assert _names(product_rows, predicate) == ["Office Chair", "Standing Desk"]


@pytest.mark.parametrize(
    ("operator_name", "operand", "expected"),
    [
        ("greater_than", 10, ["Laptop Pro", "Wireless Headphones"]),
        ("greater_than_or_equal", 15, ["Laptop Pro", "Wireless Headphones"]),
        ("less_than", 5, ["Gaming Mouse"]),
        ("less_than_or_equal", 5, ["Gaming Mouse", "Office Chair"]),
        ("not_equal", 0, ["Laptop Pro", "Office Chair", "Wireless Headphones", "Standing Desk"]),
        ("in", [5, 8], ["Office Chair", "Standing Desk"]),
        ("not_in", [0, 5, 8], ["Laptop Pro", "Wireless Headphones"]),
    ],
)
def test_comparison_operators_evaluate_in_memory(product_rows, operator_name, operand, expected) -> None:
    """Comparison and membership operators narrow the stock counts correctly."""

    predicate = compile_filter({"stock_count": {operator_name: operand}}, MEMORY_CAPABILITIES)
    assert _names(product_rows, predicate) == expected


def test_is_nil_uses_operand_truthiness(product_rows) -> None:
    """`is_nil: true` keeps nulls and `is_nil: false` drops them."""

    missing = compile_filter({"description": {"is_nil": True}}, MEMORY_CAPABILITIES)
    present = compile_filter({"deleted_at": {"is_nil": False}}, MEMORY_CAPABILITIES)

    assert _names(product_rows, missing) == ["Standing Desk"]
    assert _names(product_rows, present) == ["Office Chair"]
    assert present.conditions == (Condition("deleted_at", "isnull", False),)


def test_unknown_operator_falls_back_to_equality(product_rows) -> None:
    """Unrecognized operators behave as equality and never raise."""

    predicate = compile_filter({"status": {"unknown_operator": "active"}}, MEMORY_CAPABILITIES)

    assert predicate == compile_filter({"status": "active"}, MEMORY_CAPABILITIES)
    assert "Office Chair" not in _names(product_rows, predicate)


@pytest.mark.parametrize(
    ("operator_name", "operand", "needle"),
    [
        ("starts_with", "Laptop", "Laptop"),
        ("ends_with", "Mouse", "Mouse"),
        ("like", "%Desk%", "Desk"),
        ("like", "Office%", "Office"),
        ("ilike", "%LAPTOP%", "LAPTOP"),
    ],
)
def test_string_operators_fall_back_to_contains_without_pattern_matching(operator_name, operand, needle) -> None:
    """Capability-limited backends substitute `contains` with wildcards stripped."""

    predicate = compile_filter({"name": {operator_name: operand}}, MEMORY_CAPABILITIES)
    assert predicate == compile_filter({"name": {"contains": needle}}, MEMORY_CAPABILITIES)


def test_ilike_fallback_stays_case_sensitive(product_rows) -> None:
    """The `ilike` fallback does not fold case."""

    predicate = compile_filter({"description": {"ilike": "%LAPTOP%"}}, MEMORY_CAPABILITIES)
    assert _names(product_rows, predicate) == []

    predicate = compile_filter({"description": {"ilike": "%laptop%"}}, MEMORY_CAPABILITIES)
    assert _names(product_rows, predicate) == ["Laptop Pro"]


def test_sql_backends_keep_native_string_lookups() -> None:
    """Backends with pattern matching compile to dedicated lookups."""

    predicate = compile_filter(
        {"name": {"starts_with": "Lap", "ends_with": "Pro", "ilike": "%pro%"}},
        SQL_CAPABILITIES,
    )

    assert predicate.conditions == (
        Condition("name", "startswith", "Lap"),
        Condition("name", "endswith", "Pro"),
        Condition("name", "icontains", "pro"),
    )


@pytest.mark.parametrize(
    ("pattern", "lookup", "operand"),
    [
        ("%chair%", "contains", "chair"),
        ("Office%", "startswith", "Office"),
        ("%Desk", "endswith", "Desk"),
        ("Gaming Mouse", "exact", "Gaming Mouse"),
        ("Office%Chair", "regex", "^Office.*Chair$"),
    ],
)
def test_like_patterns_translate_to_lookups(pattern, lookup, operand) -> None:
    """LIKE wildcards map onto the closest Django lookup."""

    assert like_condition("name", pattern, case_insensitive=False) == Condition("name", lookup, operand)


def test_ilike_without_case_folding_compiles_like_like() -> None:
    """Pattern-capable backends without case folding get a case-sensitive match."""

    capabilities = BackendCapabilities(supports_pattern_match=True, supports_case_insensitive=False)
    predicate = compile_filter({"name": {"ilike": "Lap%"}}, capabilities)
    assert predicate.conditions == (Condition("name", "startswith", "Lap"),)


def test_regex_condition_matches_in_memory() -> None:
    """Regex conditions produced from LIKE patterns evaluate against records."""

    condition = like_condition("name", "office%chair", case_insensitive=True)

    assert condition.matches({"name": "Office Swivel Chair"})
    assert not condition.matches({"name": "Office Desk"})


def test_negated_conditions_build_inverted_q_objects() -> None:
    """`not_equal` and `not_in` are negated lookups."""

    predicate = compile_filter({"status": {"not_in": ["discontinued"], "not_equal": "draft"}})

    assert predicate.to_q() == ~Q(status__in=("discontinued",)) & ~Q(status__exact="draft")


def test_predicate_to_q_conjoins_conditions() -> None:
    """Every condition is AND-ed into the resulting Q object."""

    predicate = compile_filter({"stock_count": {"greater_than": 10}, "featured": True})
    assert predicate.to_q() == Q(stock_count__gt=10) & Q(featured__exact=True)


def test_scalar_in_operand_is_wrapped() -> None:
    """A scalar operand for `in` becomes a one-element membership."""

    predicate = compile_filter({"category": {"in": "furniture"}})
    assert predicate.conditions == (Condition("category", "in", ("furniture",)),)


def test_malformed_specs_are_skipped_not_raised() -> None:
    """Non-mapping entries are ignored rather than failing compilation."""

    assert compile_filter("status").is_identity
    assert compile_filter([{"status": "active"}, 42, None]).conditions == (Condition("status", "exact", "active"),)


def test_comparisons_against_missing_values_do_not_match() -> None:
    """Null field values never satisfy ordering or string operators."""

    predicate = compile_filter({"rating": {"greater_than": 1}, "description": {"contains": "x"}}, MEMORY_CAPABILITIES)
    assert not predicate({"rating": None, "description": "x"})
    assert not predicate({"rating": 2, "description": None})
    assert predicate({"rating": 2, "description": "xyz"})


def test_parse_filter_value_tags_leaf_shapes() -> None:
    """Leaf values are classified into scalar, list, and operator variants."""

    assert parse_filter_value("a") == ScalarFilter("a")
    assert parse_filter_value(None) == ScalarFilter(None)
    assert parse_filter_value(["a", "b"]) == ListFilter(("a", "b"))

    parsed = parse_filter_value({"greater_than": 1, "bogus": 2})
    assert isinstance(parsed, OperatorFilter)
    assert [clause.operator for clause in parsed.clauses] == [FilterOperator.greater_than, FilterOperator.unknown]
    assert parsed.clauses[1].name == "bogus"
