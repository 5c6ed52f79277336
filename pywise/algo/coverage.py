"""Pair coverage statistics for a generated table."""

from __future__ import annotations

import itertools
from dataclasses import dataclass

from pywise.algo.base import are_compatible
from pywise.core.combination import CombinationTable, pair_key
from pywise.core.parameter import ParameterSet


@dataclass
class CoverageStats:
    """How well a table covers the compatible pairs of a parameter set.

    Attributes:
        total_pairs: Number of compatible partition pairs.
        covered_pairs: Compatible pairs present in at least one combination.
        coverage_pct: Percentage coverage (0-100).
        test_count: Number of combinations in the table.
        excluded_by_rules: Pairs rejected by rules.
        incomplete_count: Degraded combinations the algorithm gave up on.
    """

    total_pairs: int
    covered_pairs: int
    coverage_pct: float
    test_count: int
    excluded_by_rules: int = 0
    incomplete_count: int = 0

    @property
    def uncovered_pairs(self) -> int:
        return self.total_pairs - self.covered_pairs

    def __repr__(self) -> str:
        return (
            f"CoverageStats({self.covered_pairs}/{self.total_pairs} pairs covered "
            f"({self.coverage_pct:.1f}%), {self.test_count} tests)"
        )


def compatible_pair_keys(parameter_set: ParameterSet) -> tuple[set[str], int]:
    """Keys of every compatible pair, plus the count of excluded ones."""
    size = len(parameter_set)
    keys: set[str] = set()
    excluded = 0
    for i, j in itertools.combinations(range(size), 2):
        for v1 in parameter_set[i].partitions:
            for v2 in parameter_set[j].partitions:
                if are_compatible(v1, v2):
                    keys.add(pair_key(size, i, v1, j, v2))
                else:
                    excluded += 1
    return keys, excluded


def coverage_stats(table: CombinationTable, parameter_set: ParameterSet) -> CoverageStats:
    """Measure pair coverage of ``table`` against ``parameter_set``.

    Pairs are matched by partition names, so the table may come from a
    propagated copy of the parameter set.
    """
    feasible, excluded = compatible_pair_keys(parameter_set)
    present: set[str] = set()
    for combination in table:
        present.update(combination.pair_keys())

    covered = len(feasible & present)
    total = len(feasible)
    pct = (covered / total * 100) if total > 0 else 100.0

    return CoverageStats(
        total_pairs=total,
        covered_pairs=covered,
        coverage_pct=pct,
        test_count=len(table),
        excluded_by_rules=excluded,
        incomplete_count=len(table.incomplete),
    )


def uncovered_pairs(table: CombinationTable, parameter_set: ParameterSet) -> list[str]:
    """Keys of compatible pairs no combination in ``table`` contains."""
    feasible, _ = compatible_pair_keys(parameter_set)
    for combination in table:
        feasible.difference_update(combination.pair_keys())
    return sorted(feasible)
