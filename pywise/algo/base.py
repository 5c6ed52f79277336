"""Common contract for generation algorithms.

Every algorithm turns a ParameterSet into a CombinationTable whose members
are filled and conflict-free. Compatibility of two partitions requires both
owning parameters to accept the pair.
"""

from __future__ import annotations

import itertools
import logging
import random
from abc import ABC, abstractmethod

from pywise.core.combination import Combination, CombinationTable
from pywise.core.parameter import ParameterSet
from pywise.core.partitions import EquivalencePartition
from pywise.errors import InconsistentCombinationError, InvalidInputError

logger = logging.getLogger(__name__)


def are_compatible(first: EquivalencePartition, second: EquivalencePartition) -> bool:
    """True if both owning parameters accept the pair (logical AND)."""
    return first.is_compatible_with(second) and second.is_compatible_with(first)


class GenerationAlgorithm(ABC):
    """Base class for combination generation algorithms.

    Attributes:
        seed: Random seed for reproducible shuffles. None means a fresh
            ordering on every run.
    """

    def __init__(self, seed: int | None = None) -> None:
        self.seed = seed
        self._rng = random.Random(seed)

    @abstractmethod
    def generate(self, parameter_set: ParameterSet) -> CombinationTable:
        """Generate combinations for ``parameter_set``."""

    @property
    def name(self) -> str:
        return type(self).__name__

    def is_compatible(self, first: EquivalencePartition, second: EquivalencePartition) -> bool:
        return are_compatible(first, second)

    def check_no_conflicts(self, combination: Combination) -> bool:
        """True if every pair of assigned slots is compatible."""
        for (_, first), (_, second) in itertools.combinations(combination.assigned(), 2):
            if not self.is_compatible(first, second):
                logger.debug(f"Incompatible values: {first!r} and {second!r}")
                return False
        return True

    def is_valid_combination(self, combination: Combination) -> bool:
        if combination is None:
            raise InvalidInputError("Combination cannot be None")
        return self.check_no_conflicts(combination)

    def conflicts_with_assigned(
        self,
        combination: Combination,
        index: int,
        partition: EquivalencePartition,
    ) -> bool:
        """True if ``partition`` clashes with any assigned slot other than ``index``."""
        for other_index, other in combination.assigned():
            if other_index != index and not self.is_compatible(partition, other):
                return True
        return False

    def shuffled(self, items: tuple | list) -> list:
        result = list(items)
        self._rng.shuffle(result)
        return result

    def complete_combination(self, combination: Combination) -> bool:
        """Fill every empty slot with the first compatible partition.

        Partitions are tried in shuffled order. A slot with no compatible
        partition is left empty and a warning is logged.

        Returns:
            True if the combination ended up filled.

        Raises:
            InconsistentCombinationError: If the starting combination already
                has a conflict.
        """
        if not self.check_no_conflicts(combination):
            raise InconsistentCombinationError(
                f"Combination should be initially consistent, with no conflicting "
                f"values. It is not: {combination.key}",
                key=combination.key,
            )
        initial = combination.key
        for index, parameter in enumerate(combination.parameters):
            if combination[index] is not None:
                continue
            for partition in self.shuffled(parameter.partitions):
                if not self.conflicts_with_assigned(combination, index, partition):
                    combination.set_value(index, partition)
                    break
            else:
                logger.warning(
                    f"Failed to find value of parameter '{parameter.name}' compatible "
                    f"with other parameter values in combination {initial}"
                )
        return combination.is_filled
