"""Combinations and the table that collects them.

A Combination is one test case: a fixed-size vector with one slot per
parameter, each slot empty (None) or holding a partition of the parameter
at that position.

Example:
    >>> combo = Combination(parameter_set)
    >>> combo.set_value(0, parameter_set[0].get_partition("Chrome"))
    >>> combo.key
    'Chrome|_'
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Iterator, Sequence
from typing import Any

from pywise.core.parameter import ParameterSet, TestParameter
from pywise.core.partitions import EquivalencePartition
from pywise.errors import InvalidInputError

logger = logging.getLogger(__name__)

SEPARATOR = "|"
EMPTY = "_"


class Combination:
    """A partial or complete assignment of partitions to parameter slots.

    Slot ``i`` may only hold a partition owned by the parameter at position
    ``i``. Once frozen (placed in a CombinationTable) the combination is
    read-only.

    Attributes:
        parameters: The parameters, in slot order.
    """

    __slots__ = ("parameters", "_values", "_frozen")

    def __init__(self, parameters: ParameterSet | Sequence[TestParameter]) -> None:
        if parameters is None or len(parameters) == 0:
            raise InvalidInputError("Parameters list must not be None or empty")
        self.parameters: tuple[TestParameter, ...] = tuple(parameters)
        self._values: list[EquivalencePartition | None] = [None] * len(self.parameters)
        self._frozen = False

    @classmethod
    def of(
        cls,
        parameters: ParameterSet | Sequence[TestParameter],
        assignments: dict[int, EquivalencePartition],
    ) -> Combination:
        """Build a combination with the given slots pre-filled."""
        combination = cls(parameters)
        for index, partition in assignments.items():
            combination.set_value(index, partition)
        return combination

    def copy(self) -> Combination:
        """Return an unfrozen copy."""
        clone = Combination(self.parameters)
        clone._values = list(self._values)
        return clone

    def __len__(self) -> int:
        return len(self._values)

    def __getitem__(self, index: int) -> EquivalencePartition | None:
        return self._values[index]

    def get_value(self, index: int) -> EquivalencePartition | None:
        return self._values[index]

    @property
    def values(self) -> tuple[EquivalencePartition | None, ...]:
        return tuple(self._values)

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._values):
            raise IndexError(f"Index {index} out of bounds for length {len(self._values)}")

    def _check_mutable(self) -> None:
        if self._frozen:
            raise InvalidInputError(f"Combination {self.key} is frozen", key=self.key)

    def set_value(self, index: int, partition: EquivalencePartition) -> None:
        """Assign a partition to slot ``index``.

        Raises:
            IndexError: If ``index`` is out of range.
            InvalidInputError: If ``partition`` is None, belongs to another
                parameter, or the combination is frozen.
        """
        self._check_index(index)
        self._check_mutable()
        if partition is None:
            raise InvalidInputError(
                f"Cannot assign None to slot {index}; use clear() to unset a slot"
            )
        owner = self.parameters[index]
        if partition.parameter is None or partition.parameter.origin is not owner.origin:
            raise InvalidInputError(
                f"Partition {partition!r} does not belong to parameter '{owner.name}' "
                f"at slot {index}",
                slot=index,
            )
        self._values[index] = partition

    def clear(self, index: int) -> None:
        """Unset slot ``index``."""
        self._check_index(index)
        self._check_mutable()
        self._values[index] = None

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def is_filled(self) -> bool:
        """True when no slot is empty."""
        return all(value is not None for value in self._values)

    @property
    def set_count(self) -> int:
        """Number of assigned slots."""
        return sum(1 for value in self._values if value is not None)

    def assigned(self) -> Iterator[tuple[int, EquivalencePartition]]:
        """Yield ``(index, partition)`` for every assigned slot."""
        for index, value in enumerate(self._values):
            if value is not None:
                yield index, value

    @property
    def key(self) -> str:
        """Canonical key: partition names joined by '|', empty slots as '_'.

        Example: "Chrome|_|1024x768"
        """
        return SEPARATOR.join(
            EMPTY if value is None else value.name for value in self._values
        )

    def pair_keys(self) -> Iterator[str]:
        """Yield the key of every two-slot sub-combination."""
        assigned = list(self.assigned())
        size = len(self._values)
        for (i, first), (j, second) in itertools.combinations(assigned, 2):
            yield pair_key(size, i, first, j, second)

    def merge(self, other: Combination) -> Combination | None:
        """Combine the assigned slots of two combinations.

        Returns:
            A new combination, or None if a slot is assigned to different
            partitions in the two.
        """
        if other is None:
            raise InvalidInputError("Cannot merge with a None combination")
        if len(other) != len(self):
            raise InvalidInputError(
                f"Cannot merge combinations of size {len(self)} and {len(other)}"
            )
        result = self.copy()
        for index, value in other.assigned():
            current = result._values[index]
            if current is None:
                result._values[index] = value
            elif current is not value:
                logger.debug(f"Merge conflict at slot {index}: {current!r} vs {value!r}")
                return None
        return result

    @property
    def description(self) -> str:
        """Human-readable rendering, e.g. "Browser=Chrome, OS=macOS"."""
        return ", ".join(
            f"{parameter.name}={EMPTY if value is None else value.name}"
            for parameter, value in zip(self.parameters, self._values)
        )

    def as_data_provider_row(self) -> list[Any]:
        """Row of ``[description, value_0, ..., value_n-1]``.

        Reads every partition once, so cycling partitions advance.
        """
        row: list[Any] = [self.description]
        row.extend(None if value is None else value.value for value in self._values)
        return row

    def as_row_map(self) -> dict[str, Any]:
        """Mapping of parameter name to produced value, plus a description."""
        row: dict[str, Any] = {
            parameter.name: (None if value is None else value.value)
            for parameter, value in zip(self.parameters, self._values)
        }
        row["combination_description"] = self.description
        return row

    def to_dict(self) -> dict[str, str | None]:
        """Mapping of parameter name to partition name."""
        return {
            parameter.name: (None if value is None else value.name)
            for parameter, value in zip(self.parameters, self._values)
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Combination):
            return NotImplemented
        if len(self.parameters) != len(other.parameters):
            return False
        if any(a is not b for a, b in zip(self.parameters, other.parameters)):
            return False
        return all(a is b for a, b in zip(self._values, other._values))

    def __hash__(self) -> int:
        return hash(self.key)

    def __repr__(self) -> str:
        return f"Combination({self.description})"


def pair_key(
    size: int,
    i: int,
    first: EquivalencePartition,
    j: int,
    second: EquivalencePartition,
) -> str:
    """Key of the combination of ``size`` slots with only ``i`` and ``j`` set."""
    names = [EMPTY] * size
    names[i] = first.name
    names[j] = second.name
    return SEPARATOR.join(names)


class CombinationTable:
    """Ordered, deduplicated set of filled combinations.

    Combinations are keyed by their canonical key; adding a combination whose
    key is already present is a no-op. Added combinations are copied and
    frozen. Degraded results (combinations an algorithm could not fill) are
    kept apart in ``incomplete`` and never show up in iteration.

    Example:
        >>> table = CombinationTable()
        >>> table.add(combo)
        True
        >>> len(table)
        1
    """

    def __init__(self, combinations: Sequence[Combination] = ()) -> None:
        self._combinations: dict[str, Combination] = {}
        self._incomplete: list[Combination] = []
        for combination in combinations:
            self.add(combination)

    def add(self, combination: Combination) -> bool:
        """Add a filled combination.

        Returns:
            True if added, False if an identical combination is present.

        Raises:
            InvalidInputError: If the combination has empty slots.
        """
        if not combination.is_filled:
            raise InvalidInputError(
                f"Only filled combinations can be added, got {combination.key}",
                key=combination.key,
            )
        key = combination.key
        if key in self._combinations:
            logger.debug(f"Skipping duplicate combination {key}")
            return False
        frozen = combination.copy()
        frozen.freeze()
        self._combinations[key] = frozen
        return True

    def add_incomplete(self, combination: Combination) -> None:
        """Record a degraded combination for diagnostics."""
        frozen = combination.copy()
        frozen.freeze()
        self._incomplete.append(frozen)

    @property
    def incomplete(self) -> list[Combination]:
        return list(self._incomplete)

    @property
    def combinations(self) -> list[Combination]:
        return list(self._combinations.values())

    def keys(self) -> list[str]:
        return list(self._combinations)

    def __len__(self) -> int:
        return len(self._combinations)

    def __iter__(self) -> Iterator[Combination]:
        return iter(list(self._combinations.values()))

    def __contains__(self, item: object) -> bool:
        if isinstance(item, Combination):
            return item.key in self._combinations
        return item in self._combinations

    def __getitem__(self, index: int) -> Combination:
        return self.combinations[index]

    def breadth(self) -> int:
        """Number of slots per combination, or -1 for an empty table."""
        if not self._combinations:
            return -1
        return len(next(iter(self._combinations.values())))

    def span(self) -> int:
        """Number of distinct parameter-value pairs present in the table."""
        pairs: set[str] = set()
        for combination in self._combinations.values():
            pairs.update(combination.pair_keys())
        return len(pairs)

    def as_data_provider(self) -> list[list[Any]]:
        """Rows of ``[description, value_0, ..., value_n-1]`` for test runners."""
        return [c.as_data_provider_row() for c in self._combinations.values()]

    def as_row_maps(self) -> list[dict[str, Any]]:
        """One dict per combination, keyed by parameter name."""
        return [c.as_row_map() for c in self._combinations.values()]

    def __repr__(self) -> str:
        first = f" First is: {self.combinations[0]}" if self._combinations else ""
        return f"CombinationTable({len(self)} combinations.{first})"
