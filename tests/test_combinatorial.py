"""Tests for exhaustive (combinatorial) generation.

Tests cover:
- Full enumeration with and without rules
- Limit handling and truncation
- Deep parameter sets without recursion
"""

from __future__ import annotations

import itertools

import pytest

from pywise import (
    CombinatorialAlgorithm,
    InvalidInputError,
    ParameterSet,
    SimpleValue,
    TestParameter,
    generate_combinatorial,
    propagate_rules,
)
from pywise.algo.base import are_compatible


def _grid() -> ParameterSet:
    return ParameterSet(
        [
            TestParameter("X", [SimpleValue("x1"), SimpleValue("x2")]),
            TestParameter("Y", [SimpleValue("y1"), SimpleValue("y2")]),
        ]
    )


# ============================================================
# Enumeration Tests
# ============================================================


class TestEnumeration:
    """Tests for exhaustive enumeration."""

    def test_two_by_two_grid(self):
        table = generate_combinatorial(_grid(), limit=99)
        assert sorted(table.keys()) == ["x1|y1", "x1|y2", "x2|y1", "x2|y2"]

    def test_no_limit(self):
        assert len(generate_combinatorial(_grid())) == 4

    def test_rules_prune(self, browser_os_resolution):
        table = generate_combinatorial(browser_os_resolution)
        assert len(table) == 14
        for combination in table:
            if combination[0].name == "Safari":
                assert combination[1].name == "macOS"

    def test_every_result_is_valid(self, browser_os_resolution):
        table = generate_combinatorial(browser_os_resolution)
        for combination in table:
            assert combination.is_filled
            for (_, a), (_, b) in itertools.combinations(combination.assigned(), 2):
                assert are_compatible(a, b)

    def test_search_order_without_limit(self):
        table = CombinatorialAlgorithm().generate(_grid())
        assert table.keys() == ["x1|y1", "x1|y2", "x2|y1", "x2|y2"]

    def test_single_parameter(self, os_param):
        table = CombinatorialAlgorithm().generate(ParameterSet([os_param]))
        assert table.keys() == ["Windows", "macOS", "Linux"]

    def test_unsatisfiable_gives_empty_table(self):
        ps = propagate_rules(
            ParameterSet(
                [
                    TestParameter("A", [SimpleValue("a")], [lambda x, y: False]),
                    TestParameter("B", [SimpleValue("b")]),
                ]
            )
        )
        assert len(CombinatorialAlgorithm().generate(ps)) == 0

    def test_many_parameters(self):
        ps = ParameterSet(
            TestParameter(f"P{i}", [SimpleValue("only")]) for i in range(1100)
        )
        table = CombinatorialAlgorithm().generate(ps)
        assert len(table) == 1
        assert table.breadth() == 1100

    def test_empty_set_rejected(self):
        with pytest.raises(InvalidInputError):
            CombinatorialAlgorithm().generate(ParameterSet())


# ============================================================
# Limit Tests
# ============================================================


class TestLimit:
    """Tests for the limit argument."""

    def test_limit_truncates_to_subset(self, browser_os_resolution):
        every = set(generate_combinatorial(browser_os_resolution).keys())
        limited = generate_combinatorial(browser_os_resolution, limit=5)
        assert len(limited) == 5
        assert set(limited.keys()) <= every

    def test_limit_equal_to_total(self, browser_os_resolution):
        assert len(generate_combinatorial(browser_os_resolution, limit=14)) == 14

    def test_limit_seed_reproducible(self, browser_os_resolution):
        a = generate_combinatorial(browser_os_resolution, limit=5, seed=8)
        b = generate_combinatorial(browser_os_resolution, limit=5, seed=8)
        assert a.keys() == b.keys()

    @pytest.mark.parametrize("limit", [0, -3])
    def test_non_positive_limit_rejected(self, limit):
        with pytest.raises(InvalidInputError, match="positive"):
            CombinatorialAlgorithm(limit=limit)

    @pytest.mark.parametrize("limit", ["5", 2.5, True])
    def test_non_integer_limit_rejected(self, limit):
        with pytest.raises(InvalidInputError, match="integer"):
            CombinatorialAlgorithm(limit=limit)

    def test_limit_checked_before_generation(self):
        with pytest.raises(InvalidInputError, match="positive"):
            generate_combinatorial(None, limit=0)
