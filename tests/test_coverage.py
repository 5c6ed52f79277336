"""Tests for pair coverage statistics."""

from __future__ import annotations

from pywise import (
    Combination,
    CombinationTable,
    CoverageStats,
    coverage_stats,
    generate_combinatorial,
    propagate_rules,
    uncovered_pairs,
)
from pywise.algo.coverage import compatible_pair_keys


class TestCompatiblePairs:
    def test_counts(self, browser_os_resolution):
        keys, excluded = compatible_pair_keys(propagate_rules(browser_os_resolution))
        # Browser-OS 9 - 2, Browser-Resolution 6, OS-Resolution 6
        assert len(keys) == 19
        assert excluded == 2
        assert "Safari|Windows|_" not in keys


class TestCoverageStats:
    """Tests for coverage_stats and uncovered_pairs."""

    def test_exhaustive_covers_everything(self, browser_os_resolution):
        ps = propagate_rules(browser_os_resolution)
        table = generate_combinatorial(ps)
        stats = coverage_stats(table, ps)
        assert stats.total_pairs == 19
        assert stats.covered_pairs == 19
        assert stats.coverage_pct == 100.0
        assert stats.uncovered_pairs == 0
        assert stats.test_count == 14
        assert stats.excluded_by_rules == 2
        assert uncovered_pairs(table, ps) == []

    def test_partial_table(self, browser_os):
        ps = propagate_rules(browser_os)
        combination = Combination.of(
            ps, {0: ps[0].get_partition("Chrome"), 1: ps[1].get_partition("Linux")}
        )
        table = CombinationTable([combination])
        stats = coverage_stats(table, ps)
        assert stats.covered_pairs == 1
        assert stats.total_pairs == 7
        assert round(stats.coverage_pct, 1) == 14.3
        assert len(uncovered_pairs(table, ps)) == 6
        assert "Chrome|Linux" not in uncovered_pairs(table, ps)

    def test_measured_against_original_set(self, browser_os):
        table = generate_combinatorial(browser_os)
        # The table was built from a propagated copy; measure against the original.
        assert coverage_stats(table, browser_os).coverage_pct == 100.0

    def test_empty_table(self, browser_os):
        stats = coverage_stats(CombinationTable(), browser_os)
        assert stats.covered_pairs == 0
        assert stats.coverage_pct == 0.0

    def test_repr(self):
        stats = CoverageStats(total_pairs=4, covered_pairs=2, coverage_pct=50.0, test_count=2)
        assert "2/4" in repr(stats)
        assert "50.0%" in repr(stats)
