"""Exhaustive (combinatorial) generation.

Enumerates every full combination that satisfies all rules with a
depth-first search over parameter positions. Partial assignments are pruned
as soon as a new partition clashes with any slot already placed, so
incompatible branches are never expanded.

The search uses an explicit stack instead of recursion, so the number of
parameters is not bounded by the interpreter's recursion limit.

Example:
    >>> table = CombinatorialAlgorithm(limit=5, seed=1).generate(parameter_set)
    >>> len(table)
    5
"""

from __future__ import annotations

import logging

from pywise.algo.base import GenerationAlgorithm
from pywise.core.combination import Combination, CombinationTable
from pywise.core.parameter import ParameterSet
from pywise.errors import InvalidInputError

logger = logging.getLogger(__name__)


def validate_limit(limit: int | None) -> int | None:
    """Reject limits that are not positive integers. None means no limit."""
    if limit is None:
        return None
    if isinstance(limit, bool) or not isinstance(limit, int):
        raise InvalidInputError(f"limit must be an integer, got {type(limit).__name__}")
    if limit < 1:
        raise InvalidInputError(f"limit must be positive, got {limit}", limit=limit)
    return limit


class CombinatorialAlgorithm(GenerationAlgorithm):
    """Generates all valid combinations, optionally capped.

    When ``limit`` is smaller than the number of valid combinations, the
    full valid set is shuffled and truncated; no attempt is made to pick a
    better-covering subset.

    Attributes:
        limit: Maximum number of combinations to return, or None.
    """

    def __init__(self, limit: int | None = None, seed: int | None = None) -> None:
        super().__init__(seed)
        self.limit = validate_limit(limit)

    def generate(self, parameter_set: ParameterSet) -> CombinationTable:
        if parameter_set is None or len(parameter_set) == 0:
            raise InvalidInputError("Parameter set must contain at least one parameter")

        logger.info(
            f"Generating all possible combinations for {len(parameter_set)} parameters, "
            f"limit: {self.limit}"
        )
        valid = self.enumerate(parameter_set)
        logger.info(f"Found {len(valid)} valid combinations (span {parameter_set.span})")

        if self.limit is not None and self.limit < len(valid):
            self._rng.shuffle(valid)
            valid = valid[: self.limit]
            logger.info(f"Truncated to {len(valid)} combinations")

        return CombinationTable(valid)

    def enumerate(self, parameter_set: ParameterSet) -> list[Combination]:
        """Every full combination that passes all rules, in search order."""
        size = len(parameter_set)
        current = Combination(parameter_set)
        results: list[Combination] = []

        # Each frame is (position, index of the next partition to try there).
        stack: list[tuple[int, int]] = [(0, 0)]
        while stack:
            position, choice = stack.pop()
            partitions = parameter_set[position].partitions
            if choice >= len(partitions):
                current.clear(position)
                continue

            # Come back for the next partition at this position later.
            stack.append((position, choice + 1))
            partition = partitions[choice]
            current.clear(position)
            if self.conflicts_with_assigned(current, position, partition):
                continue
            current.set_value(position, partition)

            if position == size - 1:
                if self.is_valid_combination(current):
                    results.append(current.copy())
                continue
            stack.append((position + 1, 0))

        return results
