"""Filter operators and engine capability profiles."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType

from .exceptions import UnsupportedOperatorError


class FilterOperator(str, Enum):
    """Canonical operators of a filter condition."""

    EQUAL = "equal"
    NOT_EQUAL = "notEqual"
    LESS = "less"
    LESS_OR_EQUAL = "lessOrEqual"
    GREATER = "greater"
    GREATER_OR_EQUAL = "greaterOrEqual"
    RANGE = "range"


LOWER_BOUND_OPERATORS = frozenset(
    {FilterOperator.GREATER, FilterOperator.GREATER_OR_EQUAL}
)
UPPER_BOUND_OPERATORS = frozenset({FilterOperator.LESS, FilterOperator.LESS_OR_EQUAL})

# Boundary characters of a Solr range query, keyed by the operator that
# produced the boundary.
_BOUNDARIES: Mapping[FilterOperator, str] = MappingProxyType(
    {
        FilterOperator.GREATER: "{",
        FilterOperator.GREATER_OR_EQUAL: "[",
        FilterOperator.LESS: "}",
        FilterOperator.LESS_OR_EQUAL: "]",
    }
)


@dataclass(frozen=True)
class OperatorProfile:
    """Operators an engine version supports and how range boundaries render.

    Engine versions differ only in data: pass a different profile to
    :class:`~solr_datasource.compiler.FilterCompiler` instead of branching.
    """

    name: str
    supported_operators: frozenset[FilterOperator]
    boundaries: Mapping[FilterOperator, str] = field(
        default_factory=lambda: _BOUNDARIES, hash=False
    )
    inclusive_lower: str = "["
    inclusive_upper: str = "]"

    def supports(self, operator: FilterOperator) -> bool:
        return operator in self.supported_operators

    @property
    def range_operators(self) -> frozenset[FilterOperator]:
        """Operators eligible for merging into a single range condition."""
        bounds = LOWER_BOUND_OPERATORS | UPPER_BOUND_OPERATORS
        return bounds & self.supported_operators

    def boundary(self, operator: FilterOperator) -> str:
        return self.boundaries[operator]


DEFAULT_PROFILE = OperatorProfile(
    name="default",
    supported_operators=frozenset(FilterOperator),
)

# Older engine connectors without exclusive boundaries.
LEGACY_PROFILE = OperatorProfile(
    name="legacy",
    supported_operators=frozenset(
        {
            FilterOperator.EQUAL,
            FilterOperator.NOT_EQUAL,
            FilterOperator.LESS_OR_EQUAL,
            FilterOperator.GREATER_OR_EQUAL,
            FilterOperator.RANGE,
        }
    ),
)


def parse_operator(
    op: FilterOperator | str, profile: OperatorProfile
) -> FilterOperator:
    """Resolve ``op`` against ``profile``; raise if it is unknown or unsupported."""
    supported = [o.value for o in profile.supported_operators]
    try:
        operator = FilterOperator(op)
    except ValueError:
        raise UnsupportedOperatorError(str(op), supported) from None
    if not profile.supports(operator):
        raise UnsupportedOperatorError(operator.value, supported)
    return operator
