"""Tests for the filter compiler."""

from __future__ import annotations

import copy

import pytest

from solr_datasource.compiler import FilterCompiler, ResolvedCondition, rangify
from solr_datasource.exceptions import FilterCompileError, UnsupportedOperatorError
from solr_datasource.operators import LEGACY_PROFILE, FilterOperator
from solr_datasource.request import FilterCondition


def cond(attribute, operator, value):
    return {"attribute": attribute, "operator": operator, "value": value}


class TestSingleConditions:
    def test_single_filter(self, compiler: FilterCompiler) -> None:
        assert compiler.compile([[cond("foo", "equal", "foo")]]) == "(foo:foo)"

    @pytest.mark.parametrize(
        ("operator", "expected"),
        [
            ("equal", "(date:2015\\-12\\-31)"),
            ("greater", "(date:{2015\\-12\\-31 TO *])"),
            ("greaterOrEqual", "(date:[2015\\-12\\-31 TO *])"),
            ("less", "(date:[* TO 2015\\-12\\-31})"),
            ("lessOrEqual", "(date:[* TO 2015\\-12\\-31])"),
            ("notEqual", "(-date:2015\\-12\\-31)"),
        ],
    )
    def test_operators(
        self, compiler: FilterCompiler, operator: str, expected: str
    ) -> None:
        assert compiler.compile([[cond("date", operator, "2015-12-31")]]) == expected

    @pytest.mark.parametrize(("value", "expected"), [(False, "0"), (True, "1")])
    def test_boolean_values(
        self, compiler: FilterCompiler, value: bool, expected: str
    ) -> None:
        assert compiler.compile([[cond("foo", "equal", value)]]) == f"(foo:{expected})"

    def test_array_values(self, compiler: FilterCompiler) -> None:
        result = compiler.compile([[cond("foo", "equal", [1, 3, 5, 7])]])
        assert result == "(foo:(1 OR 3 OR 5 OR 7))"

    def test_array_values_are_escaped(self, compiler: FilterCompiler) -> None:
        result = compiler.compile([[cond("foo", "notEqual", ["a-b", True])]])
        assert result == "(-foo:(a\\-b OR 1))"

    @pytest.mark.parametrize("operator", ["equal", "notEqual", "greater"])
    def test_empty_array_rejected(
        self, compiler: FilterCompiler, operator: str
    ) -> None:
        with pytest.raises(FilterCompileError, match="at least one value"):
            compiler.compile([[cond("foo", operator, [])]])

    def test_null_values(self, compiler: FilterCompiler) -> None:
        assert compiler.compile([[cond("foo", "equal", None)]]) == "(foo:null)"
        result = compiler.compile([[cond("foo", "notEqual", ["a", None])]])
        assert result == "(-foo:(a OR null))"

    def test_escapes_string_value(self, compiler: FilterCompiler) -> None:
        assert compiler.compile([[cond("foo", "equal", "(bar)")]]) == "(foo:\\(bar\\))"

    def test_accepts_models(self, compiler: FilterCompiler) -> None:
        condition = FilterCondition(
            attribute="foo", operator=FilterOperator.EQUAL, value=1
        )
        assert compiler.compile([[condition]]) == "(foo:1)"


class TestRange:
    def test_range_operator(self, compiler: FilterCompiler) -> None:
        assert compiler.compile([[cond("foo", "range", [1, 3])]]) == "(foo:[1 TO 3])"

    def test_range_values_are_escaped(self, compiler: FilterCompiler) -> None:
        result = compiler.compile([[cond("date", "range", ["2015-01-01", "2015-12-31"])]])
        assert result == "(date:[2015\\-01\\-01 TO 2015\\-12\\-31])"

    @pytest.mark.parametrize("value", [1, [1], [1, 2, 3], "1 TO 3"])
    def test_range_requires_pair(self, compiler: FilterCompiler, value) -> None:
        with pytest.raises(FilterCompileError, match="two values"):
            compiler.compile([[cond("foo", "range", value)]])

    def test_merges_bounds_within_and_group(self, compiler: FilterCompiler) -> None:
        result = compiler.compile(
            [[cond("foo", "greater", 1), cond("foo", "lessOrEqual", 3)]]
        )
        assert result == "(foo:{1 TO 3])"

    def test_does_not_merge_across_or_groups(self, compiler: FilterCompiler) -> None:
        result = compiler.compile(
            [[cond("foo", "greater", 1)], [cond("foo", "less", 3)]]
        )
        assert result == "((foo:{1 TO *]) OR (foo:[* TO 3}))"

    @pytest.mark.parametrize(
        ("first", "second", "expected"),
        [
            (("greater", 1), ("less", 3), "(foo:{1 TO 3})"),
            (("less", 3), ("greater", 1), "(foo:{1 TO 3})"),
            (("greaterOrEqual", 1), ("lessOrEqual", 3), "(foo:[1 TO 3])"),
            (("lessOrEqual", 3), ("greaterOrEqual", 1), "(foo:[1 TO 3])"),
            (("lessOrEqual", 3), ("greater", 1), "(foo:{1 TO 3])"),
            (("greaterOrEqual", 1), ("less", 3), "(foo:[1 TO 3})"),
        ],
    )
    def test_merge_is_order_independent(
        self, compiler: FilterCompiler, first, second, expected: str
    ) -> None:
        group = [cond("foo", *first), cond("foo", *second)]
        assert compiler.compile([group]) == expected

    def test_same_family_is_not_merged(self, compiler: FilterCompiler) -> None:
        result = compiler.compile(
            [[cond("foo", "greaterOrEqual", 1), cond("foo", "greater", 2)]]
        )
        assert result == "(foo:[1 TO *] AND foo:{2 TO *])"

    def test_three_bounds_are_not_merged(self, compiler: FilterCompiler) -> None:
        result = compiler.compile(
            [
                [
                    cond("foo", "greater", 1),
                    cond("foo", "less", 5),
                    cond("foo", "lessOrEqual", 3),
                ]
            ]
        )
        assert result == "(foo:{1 TO *] AND foo:[* TO 5} AND foo:[* TO 3])"

    def test_other_conditions_on_attribute_pass_through(
        self, compiler: FilterCompiler
    ) -> None:
        result = compiler.compile(
            [
                [
                    cond("foo", "greater", 1),
                    cond("foo", "notEqual", 2),
                    cond("foo", "less", 3),
                ]
            ]
        )
        assert result == "(-foo:2 AND foo:{1 TO 3})"

    def test_merged_ranges_follow_unmerged_conditions(
        self, compiler: FilterCompiler
    ) -> None:
        result = compiler.compile(
            [
                [
                    cond("price", "greaterOrEqual", 10),
                    cond("status", "equal", "active"),
                    cond("date", "less", 2020),
                    cond("price", "lessOrEqual", 20),
                    cond("date", "greater", 2010),
                ]
            ]
        )
        assert result == (
            "(status:active AND price:[10 TO 20] AND date:{2010 TO 2020})"
        )

    def test_legacy_profile_merges_inclusive_bounds(self) -> None:
        compiler = FilterCompiler(LEGACY_PROFILE)
        result = compiler.compile(
            [[cond("foo", "greaterOrEqual", 1337), cond("foo", "lessOrEqual", 4711)]]
        )
        assert result == "(foo:[1337 TO 4711])"


class TestRangify:
    def test_leaves_input_untouched(self) -> None:
        conditions = [
            ResolvedCondition("foo", FilterOperator.LESS, 3),
            ResolvedCondition("foo", FilterOperator.GREATER, 1),
        ]
        snapshot = list(conditions)
        merged = rangify(conditions)
        assert conditions == snapshot
        assert merged == [
            ResolvedCondition("foo", FilterOperator.RANGE, [1, 3], "{", "}")
        ]

    def test_ignores_composite_attributes(self) -> None:
        conditions = [
            ResolvedCondition(["a", "b"], FilterOperator.EQUAL, [[1, 2]]),
            ResolvedCondition("a", FilterOperator.EQUAL, 1),
        ]
        assert rangify(conditions) == conditions


class TestGroups:
    def test_complex_filters(self, compiler: FilterCompiler) -> None:
        result = compiler.compile(
            [
                [cond("authorId", "equal", 1337), cond("typeId", "equal", 4711)],
                [cond("status", "equal", "future")],
            ]
        )
        assert result == "((authorId:1337 AND typeId:4711) OR (status:future))"

    def test_empty_group_is_rejected(self, compiler: FilterCompiler) -> None:
        with pytest.raises(FilterCompileError):
            compiler.compile([[]])

    def test_compilation_is_idempotent(self, compiler: FilterCompiler) -> None:
        filters = [
            [cond("foo", "less", 3), cond("foo", "greater", 1)],
            [cond("bar", "equal", ["x", "y"])],
        ]
        snapshot = copy.deepcopy(filters)
        first = compiler.compile(filters)
        second = compiler.compile(filters)
        assert first == second
        assert filters == snapshot


class TestCompositeKeys:
    def test_composite_key_rows(self, compiler: FilterCompiler) -> None:
        result = compiler.compile(
            [[cond(["a", "b"], "equal", [[1, "x"], [2, "y"]])]]
        )
        assert result == "((a:1 AND b:x) OR (a:2 AND b:y))"

    def test_composite_values_are_escaped(self, compiler: FilterCompiler) -> None:
        result = compiler.compile(
            [
                [
                    cond(
                        ["intKey", "stringKey", "boolKey"],
                        "equal",
                        [[1337, "(foo)", True], [4711, "bar!", False]],
                    )
                ]
            ]
        )
        assert result == (
            "((intKey:1337 AND stringKey:\\(foo\\) AND boolKey:1) OR "
            "(intKey:4711 AND stringKey:bar\\! AND boolKey:0))"
        )

    def test_composite_with_other_conditions(self, compiler: FilterCompiler) -> None:
        result = compiler.compile(
            [[cond(["a", "b"], "equal", [[1, 2]]), cond("c", "equal", 3)]]
        )
        assert result == "((a:1 AND b:2) AND c:3)"

    @pytest.mark.parametrize("operator", ["notEqual", "range", "greater"])
    def test_only_equality_supported(
        self, compiler: FilterCompiler, operator: str
    ) -> None:
        with pytest.raises(FilterCompileError, match="only support 'equal'"):
            compiler.compile([[cond(["a", "b"], operator, [[1, 2]])]])

    def test_row_width_must_match(self, compiler: FilterCompiler) -> None:
        with pytest.raises(FilterCompileError, match="does not match"):
            compiler.compile([[cond(["a", "b"], "equal", [[1, 2], [3]])]])

    def test_null_in_row(self, compiler: FilterCompiler) -> None:
        result = compiler.compile([[cond(["a", "b"], "equal", [[1, None]])]])
        assert result == "((a:1 AND b:null))"

    def test_rows_required(self, compiler: FilterCompiler) -> None:
        with pytest.raises(FilterCompileError):
            compiler.compile([[cond(["a", "b"], "equal", [])]])


class TestUnsupportedOperators:
    @pytest.mark.parametrize("operator", ["less", "greater"])
    def test_legacy_profile_rejects_exclusive_bounds(self, operator: str) -> None:
        compiler = FilterCompiler(LEGACY_PROFILE)
        with pytest.raises(UnsupportedOperatorError) as exc_info:
            compiler.compile([[cond("x", operator, 1)]])
        assert exc_info.value.operator == operator
        assert f'not support "{operator}" filters' in str(exc_info.value)

    def test_unknown_operator(self, compiler: FilterCompiler) -> None:
        with pytest.raises(UnsupportedOperatorError, match="between"):
            compiler.compile([[cond("x", "between", [1, 2])]])

    def test_rejected_before_merging(self) -> None:
        compiler = FilterCompiler(LEGACY_PROFILE)
        with pytest.raises(UnsupportedOperatorError):
            compiler.compile([[cond("x", "greater", 1), cond("x", "lessOrEqual", 3)]])
