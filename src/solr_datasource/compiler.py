"""Filter compiler: OR-groups of AND-ed conditions to a Solr query string."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any, NamedTuple

from .escaping import escape_value
from .exceptions import FilterCompileError
from .operators import (
    DEFAULT_PROFILE,
    LOWER_BOUND_OPERATORS,
    UPPER_BOUND_OPERATORS,
    FilterOperator,
    OperatorProfile,
    parse_operator,
)
from .request import FilterCondition


class ResolvedCondition(NamedTuple):
    """Working copy of a condition with its operator resolved.

    ``lower``/``upper`` hold the boundary characters of a range that was
    merged from two conditions.
    """

    attribute: str | list[str]
    operator: FilterOperator
    value: Any
    lower: str | None = None
    upper: str | None = None


def _resolve(
    condition: FilterCondition | Mapping[str, Any], profile: OperatorProfile
) -> ResolvedCondition:
    if not isinstance(condition, FilterCondition):
        condition = FilterCondition.model_validate(condition)
    operator = parse_operator(condition.operator, profile)
    return ResolvedCondition(condition.attribute, operator, condition.value)


def _create_range(
    lower: ResolvedCondition, upper: ResolvedCondition, profile: OperatorProfile
) -> ResolvedCondition:
    """Create a range condition from a lower-bound and an upper-bound condition."""
    return ResolvedCondition(
        attribute=lower.attribute,
        operator=FilterOperator.RANGE,
        value=[lower.value, upper.value],
        lower=profile.boundary(lower.operator),
        upper=profile.boundary(upper.operator),
    )


def rangify(
    conditions: Sequence[ResolvedCondition], profile: OperatorProfile = DEFAULT_PROFILE
) -> list[ResolvedCondition]:
    """Merge a lower and an upper bound on the same attribute into one range.

    Only attributes with exactly two range-eligible conditions from
    different families are merged. Unmerged conditions keep their order,
    merged ranges are appended in order of first appearance.
    """
    range_operators = profile.range_operators
    by_attribute: dict[str, list[ResolvedCondition]] = {}
    for condition in conditions:
        if (
            isinstance(condition.attribute, str)
            and condition.operator in range_operators
        ):
            by_attribute.setdefault(condition.attribute, []).append(condition)

    ranges: dict[str, ResolvedCondition] = {}
    for attribute, candidates in by_attribute.items():
        if len(candidates) != 2:
            continue
        # lower bound always comes first
        ordered = sorted(
            candidates, key=lambda c: c.operator not in LOWER_BOUND_OPERATORS
        )
        lower, upper = ordered
        if (
            lower.operator in LOWER_BOUND_OPERATORS
            and upper.operator in UPPER_BOUND_OPERATORS
        ):
            ranges[attribute] = _create_range(lower, upper, profile)

    if not ranges:
        return list(conditions)

    kept = [
        c
        for c in conditions
        if not (
            isinstance(c.attribute, str)
            and c.attribute in ranges
            and c.operator in range_operators
        )
    ]
    return kept + list(ranges.values())


def _format_value(value: Any) -> str:
    value = escape_value(value)
    if value is None:
        return "null"
    return str(value)


def _validate_range_operand(value: Any, attribute: str) -> tuple[Any, Any]:
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        raise FilterCompileError(
            f"range filter on {attribute!r} requires a list of two values",
            attribute=attribute,
        )
    return value[0], value[1]


def _render_scalar(condition: ResolvedCondition, profile: OperatorProfile) -> str:
    attribute = condition.attribute
    operator = condition.operator
    value = condition.value

    if isinstance(value, (list, tuple)):
        if not value:
            raise FilterCompileError(
                f"filter on {attribute!r} requires at least one value",
                attribute=attribute,
            )
        value = [_format_value(v) for v in value]
    else:
        value = _format_value(value)

    if operator is FilterOperator.RANGE:
        lo, hi = _validate_range_operand(value, str(attribute))
        lower = condition.lower or profile.inclusive_lower
        upper = condition.upper or profile.inclusive_upper
        term = f"{lower}{lo} TO {hi}{upper}"
    else:
        if isinstance(value, list):
            term = "(" + " OR ".join(value) + ")"
        else:
            term = value
        if operator in LOWER_BOUND_OPERATORS:
            term = f"{profile.boundary(operator)}{term} TO *{profile.inclusive_upper}"
        elif operator in UPPER_BOUND_OPERATORS:
            term = f"{profile.inclusive_lower}* TO {term}{profile.boundary(operator)}"

    if operator is FilterOperator.NOT_EQUAL:
        return f"-{attribute}:{term}"
    return f"{attribute}:{term}"


def _render_composite(condition: ResolvedCondition) -> str:
    """Render a composite key filter: one AND-clause per value row, OR-ed."""
    attributes = list(condition.attribute)
    if condition.operator is not FilterOperator.EQUAL:
        raise FilterCompileError(
            f"composite key filters only support 'equal', got "
            f"{condition.operator.value!r}",
            attribute=attributes,
        )
    rows = condition.value
    if not isinstance(rows, (list, tuple)) or not rows:
        raise FilterCompileError(
            "composite key filters require a non-empty list of value rows",
            attribute=attributes,
        )

    clauses = []
    for row in rows:
        if not isinstance(row, (list, tuple)) or len(row) != len(attributes):
            raise FilterCompileError(
                f"composite key row {row!r} does not match attributes {attributes}",
                attribute=attributes,
            )
        terms = [f"{attr}:{_format_value(val)}" for attr, val in zip(attributes, row)]
        clauses.append("(" + " AND ".join(terms) + ")")
    return " OR ".join(clauses)


def render_condition(
    condition: ResolvedCondition, profile: OperatorProfile = DEFAULT_PROFILE
) -> str:
    if isinstance(condition.attribute, list):
        return _render_composite(condition)
    return _render_scalar(condition, profile)


class FilterCompiler:
    """Compiles filter expressions to Solr standard query parser syntax.

    A filter expression is a list of OR-ed groups, each a list of AND-ed
    conditions. Conditions may be :class:`FilterCondition` models or dicts
    with ``attribute``/``operator``/``value`` keys.
    """

    def __init__(self, profile: OperatorProfile = DEFAULT_PROFILE) -> None:
        self.profile = profile

    def compile(
        self,
        filters: Iterable[Iterable[FilterCondition | Mapping[str, Any]]],
    ) -> str:
        or_conditions = [self._compile_group(group) for group in filters]
        if len(or_conditions) > 1:
            return "(" + " OR ".join(or_conditions) + ")"
        return "".join(or_conditions)

    def _compile_group(
        self, group: Iterable[FilterCondition | Mapping[str, Any]]
    ) -> str:
        conditions = [_resolve(c, self.profile) for c in group]
        if not conditions:
            raise FilterCompileError(
                "filter groups must contain at least one condition"
            )
        if len(conditions) > 1:
            conditions = rangify(conditions, self.profile)
        rendered = [render_condition(c, self.profile) for c in conditions]
        return "(" + " AND ".join(rendered) + ")"
