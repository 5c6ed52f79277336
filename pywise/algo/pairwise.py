"""Pairwise (2-wise) generation.

Builds a small set of combinations in which every compatible pair of
partitions from two different parameters appears at least once.

The algorithm runs in two phases:

1. Candidate generation: every compatible pair of partitions of every two
   parameters becomes a two-slot candidate in a queue, and its key is
   marked PENDING in a coverage map.
2. Cover construction: a candidate is taken from the queue (walking it in
   steps of ``jump``), used as the seed of a new combination, and the
   remaining slots are filled with compatible partitions. Every pair of the
   finished combination is then marked COVERED and covered candidates
   drop out of the queue.

The cover is a greedy heuristic, not a minimum-size covering array.
Partition orderings are shuffled, so output order varies between runs
unless a seed is given; coverage and compatibility do not.

Example:
    >>> algorithm = PairwiseAlgorithm(jump=3, seed=42)
    >>> table = algorithm.generate(parameter_set)
    >>> len(table) < parameter_set.span
    True
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from enum import Enum

from pywise.algo.base import GenerationAlgorithm
from pywise.core.combination import Combination, CombinationTable
from pywise.core.parameter import ParameterSet
from pywise.errors import InvalidInputError, NoCandidatesError

logger = logging.getLogger(__name__)

DEFAULT_JUMP = 3


class PairStatus(Enum):
    """Coverage state of a candidate pair."""

    PENDING = 0
    COVERED = 1


def jump_order(size: int, start: int, jump: int) -> Iterator[int]:
    """Visit every index below ``size`` once, stepping by ``jump``.

    When a step lands on an index already visited, the walk moves forward
    to the next unvisited one.
    """
    seen: set[int] = set()
    index = start % size
    while len(seen) < size:
        while index in seen:
            index = (index + 1) % size
        seen.add(index)
        yield index
        index = (index + jump) % size


class PairCandidateAlgorithm(GenerationAlgorithm):
    """Shared candidate bookkeeping for the pairwise algorithms.

    Attributes:
        jump: Step used to walk the candidate queue. Larger values spread
            seeds across parameters.
    """

    def __init__(self, jump: int = DEFAULT_JUMP, seed: int | None = None) -> None:
        super().__init__(seed)
        if isinstance(jump, bool) or not isinstance(jump, int) or jump < 1:
            raise InvalidInputError(f"jump must be a positive integer, got {jump!r}")
        self.jump = jump
        self.coverage: dict[str, PairStatus] = {}
        self.queue: list[Combination] = []

    def generate_candidates(self, parameter_set: ParameterSet) -> None:
        """Fill the queue with every compatible two-slot candidate."""
        self.coverage = {}
        self.queue = []
        size = len(parameter_set)
        for i in range(size):
            for j in range(i + 1, size):
                self._generate_pairs(parameter_set, i, j)
        logger.info(f"Generated {len(self.queue)} pairs to cover")

    def _generate_pairs(self, parameter_set: ParameterSet, i: int, j: int) -> None:
        first, second = parameter_set[i], parameter_set[j]
        logger.debug(f"Generating pairs between parameters {first.name} and {second.name}")
        for v1 in self.shuffled(first.partitions):
            for v2 in self.shuffled(second.partitions):
                if not self.is_compatible(v1, v2):
                    logger.debug(f"Skipping incompatible pair: {v1!r} - {v2!r}")
                    continue
                candidate = Combination.of(parameter_set, {i: v1, j: v2})
                if not self.check_no_conflicts(candidate):
                    continue
                key = candidate.key
                if key not in self.coverage:
                    self.coverage[key] = PairStatus.PENDING
                    self.queue.append(candidate)

    def is_covered(self, candidate: Combination) -> bool:
        return self.coverage.get(candidate.key) is PairStatus.COVERED

    def mark_covered(self, combination: Combination) -> int:
        """Mark every pair of ``combination`` as covered.

        Returns:
            How many pairs changed from pending to covered.
        """
        newly_covered = 0
        for key in combination.pair_keys():
            if self.coverage.get(key) is not PairStatus.COVERED:
                if key in self.coverage:
                    newly_covered += 1
                self.coverage[key] = PairStatus.COVERED
        return newly_covered

    @property
    def pending_count(self) -> int:
        return sum(1 for status in self.coverage.values() if status is PairStatus.PENDING)


class PairwiseAlgorithm(PairCandidateAlgorithm):
    """Seed-and-complete pairwise generation.

    Each combination starts from one uncovered candidate pair and is filled
    slot by slot with the first compatible partition, in shuffled order.

    Example:
        >>> table = PairwiseAlgorithm().generate(parameter_set)
    """

    def generate(self, parameter_set: ParameterSet) -> CombinationTable:
        if parameter_set is None or len(parameter_set) == 0:
            raise InvalidInputError("Parameter set must contain at least one parameter")

        logger.info(f"Starting pairwise test generation with jump value {self.jump}")
        table = CombinationTable()

        if len(parameter_set) == 1:
            # No pairs exist; every partition is its own combination.
            for partition in parameter_set[0].partitions:
                table.add(Combination.of(parameter_set, {0: partition}))
            return table

        self.generate_candidates(parameter_set)
        initial_size = len(self.queue)
        offset = 0

        while self.queue:
            self.queue = [c for c in self.queue if not self.is_covered(c)]
            if not self.queue:
                break

            index = self._select_seed(offset)
            seed = self.queue.pop(index)
            offset = index

            combination = seed.copy()
            if self.complete_combination(combination):
                table.add(combination)
                self.mark_covered(combination)
            else:
                logger.warning(
                    f"Could not complete combination seeded by {seed.key}; "
                    f"keeping degraded result {combination.key}"
                )
                table.add_incomplete(combination)

            logger.debug(
                f"Progress: {initial_size - len(self.queue)}/{initial_size} candidates "
                f"consumed, queue size: {len(self.queue)}"
            )

        logger.info(f"Completed pairwise test generation with {len(table)} test cases")
        return table

    def _select_seed(self, offset: int) -> int:
        """Index of the first non-conflicting candidate in jump order.

        Raises:
            NoCandidatesError: If every remaining candidate conflicts.
        """
        for index in jump_order(len(self.queue), offset, self.jump):
            candidate = self.queue[index]
            if self.check_no_conflicts(candidate):
                return index
            logger.debug(f"Skipping conflicting candidate {candidate.key}")
        raise NoCandidatesError(
            f"All {len(self.queue)} remaining candidates are conflicting",
            remaining=len(self.queue),
        )
