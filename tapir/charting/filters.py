"""Compile declarative filter specifications into query predicates.

A filter specification is JSON-shaped and loosely typed:

- `{"status": "active"}` is an equality check,
- `{"category": ["a", "b"]}` is a membership check,
- `{"stock_count": {"greater_than": 10}}` applies named operators,
- `[{...}, {...}]` conjoins several mappings.

Every condition is AND-ed. Compilation never raises: unknown operators fall
back to equality and unsupported shapes are skipped, so a bad filter narrows a
chart less precisely instead of breaking the page that renders it.

The compiled `Predicate` is backend neutral. Django querysets consume it via
`Predicate.to_q()`; in-memory tables call `Predicate.matches(record)`.
"""

from __future__ import annotations

import logging
import operator
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from django.db.models import Q

from .fields import read_field

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class BackendCapabilities:
    """Describe which string operators a query backend supports natively.

    Args:
        supports_pattern_match: Backend can evaluate prefix/suffix/wildcard matches.
        supports_case_insensitive: Backend can fold case while matching.
    """

    supports_pattern_match: bool
    supports_case_insensitive: bool


SQL_CAPABILITIES = BackendCapabilities(supports_pattern_match=True, supports_case_insensitive=True)
MEMORY_CAPABILITIES = BackendCapabilities(supports_pattern_match=False, supports_case_insensitive=False)


class FilterOperator(StrEnum):
    """Operators accepted inside a per-field operator mapping."""

    greater_than = "greater_than"
    greater_than_or_equal = "greater_than_or_equal"
    less_than = "less_than"
    less_than_or_equal = "less_than_or_equal"
    not_equal = "not_equal"
    is_nil = "is_nil"
    contains = "contains"
    starts_with = "starts_with"
    ends_with = "ends_with"
    like = "like"
    ilike = "ilike"
    in_ = "in"
    not_in = "not_in"
    unknown = "unknown"

    @classmethod
    def parse(cls, name: object) -> FilterOperator:
        """Return the operator for `name`, or `unknown` when unrecognized."""

        try:
            return cls(str(name))
        except ValueError:
            return cls.unknown


@dataclass(frozen=True, slots=True)
class ScalarFilter:
    """Leaf filter that compares a field for equality."""

    value: Any


@dataclass(frozen=True, slots=True)
class ListFilter:
    """Leaf filter that requires the field to equal one of `values`."""

    values: tuple[Any, ...]


@dataclass(frozen=True, slots=True)
class OperatorClause:
    """A single `operator -> operand` entry of an operator mapping.

    Args:
        name: Operator name as written in the filter specification.
        operator: Parsed operator (`unknown` for unrecognized names).
        operand: Operand value as written.
    """

    name: str
    operator: FilterOperator
    operand: Any


@dataclass(frozen=True, slots=True)
class OperatorFilter:
    """Leaf filter made of one or more operator clauses."""

    clauses: tuple[OperatorClause, ...]


FilterValue = ScalarFilter | ListFilter | OperatorFilter


def _is_sequence(value: object) -> bool:
    return isinstance(value, (list, tuple, set, frozenset))


def parse_filter_value(raw: object) -> FilterValue:
    """Classify a raw leaf filter value.

    Args:
        raw: The value found under a field name in a filter mapping.

    Returns:
        OperatorFilter for mappings, ListFilter for sequences, otherwise ScalarFilter.
    """

    if isinstance(raw, Mapping):
        return OperatorFilter(
            clauses=tuple(
                OperatorClause(name=str(name), operator=FilterOperator.parse(name), operand=operand)
                for name, operand in raw.items()
            )
        )
    if _is_sequence(raw):
        return ListFilter(values=tuple(raw))
    return ScalarFilter(value=raw)


_COMPARISONS: dict[str, Callable[[Any, Any], bool]] = {
    "gt": operator.gt,
    "gte": operator.ge,
    "lt": operator.lt,
    "lte": operator.le,
}


def _string_match(lookup: str, text: str, needle: str) -> bool:
    if lookup.startswith("i"):
        text = text.casefold()
        needle = needle.casefold()
        lookup = lookup[1:]
    if lookup == "exact":
        return text == needle
    if lookup == "contains":
        return needle in text
    if lookup == "startswith":
        return text.startswith(needle)
    if lookup == "endswith":
        return text.endswith(needle)
    raise ValueError(f"Unsupported lookup: {lookup!r}")


@dataclass(frozen=True, slots=True)
class Condition:
    """A single field constraint expressed as a Django-style lookup.

    Args:
        field: Field name (may use `__` traversal on Django backends).
        lookup: Django lookup name (`exact`, `gt`, `contains`, `in`, ...).
        operand: Right-hand side of the comparison.
        negated: Whether the condition is inverted.
    """

    field: str
    lookup: str
    operand: Any
    negated: bool = False

    def to_q(self) -> Q:
        """Return the Django `Q` object for this condition."""

        q = Q(**{f"{self.field}__{self.lookup}": self.operand})
        return ~q if self.negated else q

    def matches(self, record: object) -> bool:
        """Evaluate the condition against an in-memory record."""

        result = self._evaluate(read_field(record, self.field))
        return not result if self.negated else result

    def _evaluate(self, value: Any) -> bool:
        if self.lookup == "exact":
            return value == self.operand
        if self.lookup == "isnull":
            return (value is None) == bool(self.operand)
        if self.lookup == "in":
            return value in self.operand
        if value is None:
            return False
        comparison = _COMPARISONS.get(self.lookup)
        if comparison is not None:
            return comparison(value, self.operand)
        if self.lookup == "regex":
            return re.search(str(self.operand), str(value)) is not None
        if self.lookup == "iregex":
            return re.search(str(self.operand), str(value), flags=re.IGNORECASE) is not None
        return _string_match(self.lookup, str(value), str(self.operand))


@dataclass(frozen=True, slots=True)
class Predicate:
    """A conjunction of conditions produced by `FilterCompiler.compile`."""

    conditions: tuple[Condition, ...] = ()

    @property
    def is_identity(self) -> bool:
        """Return True when the predicate places no constraint."""

        return not self.conditions

    def __and__(self, other: Predicate) -> Predicate:
        return Predicate(conditions=self.conditions + other.conditions)

    def to_q(self) -> Q:
        """Return a Django `Q` object AND-ing every condition."""

        q = Q()
        for condition in self.conditions:
            q &= condition.to_q()
        return q

    def matches(self, record: object) -> bool:
        """Return True when every condition holds for `record`."""

        return all(condition.matches(record) for condition in self.conditions)

    def __call__(self, record: object) -> bool:
        return self.matches(record)


def _as_tuple(operand: object) -> tuple[Any, ...]:
    if _is_sequence(operand):
        return tuple(operand)  # type: ignore[arg-type]
    return (operand,)


def like_condition(field: str, pattern: object, *, case_insensitive: bool) -> Condition:
    """Translate a SQL `LIKE` pattern with `%` wildcards into a lookup.

    Simple shapes map onto the dedicated lookups (`%x%` contains, `x%`
    startswith, `%x` endswith, no wildcard exact); anything else becomes an
    anchored regular expression.

    Args:
        field: Field name.
        pattern: LIKE pattern.
        case_insensitive: Use the case-folding lookups.

    Returns:
        The equivalent Condition.
    """

    prefix = "i" if case_insensitive else ""
    text = str(pattern)
    inner = text.strip("%")
    if "%" not in inner:
        leading = text.startswith("%")
        trailing = text.endswith("%") and len(text) > 1
        if leading and trailing:
            return Condition(field, f"{prefix}contains", inner)
        if trailing:
            return Condition(field, f"{prefix}startswith", inner)
        if leading:
            return Condition(field, f"{prefix}endswith", inner)
        return Condition(field, f"{prefix}exact", inner)
    regex = "^" + ".*".join(re.escape(part) for part in text.split("%")) + "$"
    return Condition(field, f"{prefix}regex", regex)


def _contains_without_wildcards(field: str, pattern: object) -> Condition:
    return Condition(field, "contains", str(pattern).replace("%", ""))


OperatorBuilder = Callable[[str, Any], Condition]


def operator_table(capabilities: BackendCapabilities) -> dict[FilterOperator, OperatorBuilder]:
    """Build the operator -> condition table for a backend.

    Backends without pattern matching get `contains` in place of
    `starts_with`, `ends_with`, `like` and `ilike` (wildcards stripped). The
    `ilike` fallback is case-sensitive.

    Args:
        capabilities: Capability descriptor of the target backend.

    Returns:
        Mapping from operator to a `(field, operand) -> Condition` builder.
    """

    pattern = capabilities.supports_pattern_match
    fold = pattern and capabilities.supports_case_insensitive

    table: dict[FilterOperator, OperatorBuilder] = {
        FilterOperator.greater_than: lambda field, value: Condition(field, "gt", value),
        FilterOperator.greater_than_or_equal: lambda field, value: Condition(field, "gte", value),
        FilterOperator.less_than: lambda field, value: Condition(field, "lt", value),
        FilterOperator.less_than_or_equal: lambda field, value: Condition(field, "lte", value),
        FilterOperator.not_equal: lambda field, value: Condition(field, "exact", value, negated=True),
        FilterOperator.is_nil: lambda field, value: Condition(field, "isnull", bool(value)),
        FilterOperator.contains: lambda field, value: Condition(field, "contains", value),
        FilterOperator.in_: lambda field, value: Condition(field, "in", _as_tuple(value)),
        FilterOperator.not_in: lambda field, value: Condition(field, "in", _as_tuple(value), negated=True),
        FilterOperator.unknown: lambda field, value: Condition(field, "exact", value),
    }
    if pattern:
        table[FilterOperator.starts_with] = lambda field, value: Condition(field, "startswith", value)
        table[FilterOperator.ends_with] = lambda field, value: Condition(field, "endswith", value)
        table[FilterOperator.like] = lambda field, value: like_condition(field, value, case_insensitive=False)
        table[FilterOperator.ilike] = lambda field, value: like_condition(field, value, case_insensitive=fold)
    else:
        table[FilterOperator.starts_with] = lambda field, value: Condition(field, "contains", value)
        table[FilterOperator.ends_with] = lambda field, value: Condition(field, "contains", value)
        table[FilterOperator.like] = _contains_without_wildcards
        table[FilterOperator.ilike] = _contains_without_wildcards
    return table


class FilterCompiler:
    """Compile filter specifications for a backend with given capabilities."""

    def __init__(self, capabilities: BackendCapabilities = SQL_CAPABILITIES) -> None:
        self.capabilities = capabilities

    def compile(self, spec: object) -> Predicate:
        """Compile a filter specification into a Predicate.

        Args:
            spec: None, a field mapping, or a sequence of field mappings.

        Returns:
            The conjunction of every condition found in `spec`. `None` and
            empty specs compile to the identity predicate.
        """

        table = operator_table(self.capabilities)
        return Predicate(conditions=tuple(self._compile_spec(spec, table)))

    def _compile_spec(self, spec: object, table: dict[FilterOperator, OperatorBuilder]) -> list[Condition]:
        if spec is None:
            return []
        if isinstance(spec, Mapping):
            conditions: list[Condition] = []
            for field, raw in spec.items():
                conditions.extend(self._compile_field(str(field), parse_filter_value(raw), table))
            return conditions
        if _is_sequence(spec):
            conditions = []
            for entry in spec:  # type: ignore[union-attr]
                conditions.extend(self._compile_spec(entry, table))
            return conditions
        logger.warning("Ignoring filter entry that is not a mapping: %r", spec)
        return []

    def _compile_field(
        self,
        field: str,
        value: FilterValue,
        table: dict[FilterOperator, OperatorBuilder],
    ) -> list[Condition]:
        if isinstance(value, OperatorFilter):
            conditions = []
            for clause in value.clauses:
                if clause.operator is FilterOperator.unknown:
                    logger.debug("Unknown filter operator %r on %s; using equality.", clause.name, field)
                conditions.append(table[clause.operator](field, clause.operand))
            return conditions
        if isinstance(value, ListFilter):
            return [Condition(field, "in", value.values)]
        return [Condition(field, "exact", value.value)]


def compile_filter(spec: object, capabilities: BackendCapabilities = SQL_CAPABILITIES) -> Predicate:
    """Compile `spec` with a one-off FilterCompiler."""

    return FilterCompiler(capabilities).compile(spec)
