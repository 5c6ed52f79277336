"""Generation algorithms."""

from pywise.algo.base import GenerationAlgorithm, are_compatible
from pywise.algo.combinatorial import CombinatorialAlgorithm
from pywise.algo.coverage import CoverageStats, coverage_stats, uncovered_pairs
from pywise.algo.legacy import LegacyPairwiseAlgorithm
from pywise.algo.pairwise import DEFAULT_JUMP, PairStatus, PairwiseAlgorithm

__all__ = [
    "GenerationAlgorithm",
    "are_compatible",
    "PairwiseAlgorithm",
    "LegacyPairwiseAlgorithm",
    "CombinatorialAlgorithm",
    "PairStatus",
    "DEFAULT_JUMP",
    "CoverageStats",
    "coverage_stats",
    "uncovered_pairs",
]
