"""Value partitions: the equivalence classes a parameter can take.

A partition is a named source of one concrete value per read. Three
flavours exist:

- SimpleValue: always returns the same value.
- GenericPartition: calls a zero-argument producer on every read.
- CyclingPartition: walks a default value plus a list of equivalent
  values, wrapping around forever.

Example:
    >>> from pywise.core.partitions import CyclingPartition, SimpleValue
    >>>
    >>> windows = SimpleValue("Windows")
    >>> chrome = CyclingPartition("Chrome", "116.0", ["116.0", "116.1", "116.2"])
    >>> [chrome.value for _ in range(4)]
    ['116.0', '116.1', '116.2', '116.0']
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any

from pywise.errors import InvalidInputError

if TYPE_CHECKING:
    from pywise.core.parameter import TestParameter


class EquivalencePartition(ABC):
    """Base class for all value partitions.

    Partitions compare by identity: two reads of a cycling partition may
    return different values yet still occupy the same combination slot.
    Subclasses only implement ``value``.

    Attributes:
        name: Identifier, unique within the owning parameter.
        parameter: The owning TestParameter. Set when the partition is
            handed to a parameter; afterwards it can only move to a copy of
            that parameter made by ``TestParameter.with_dependencies``.
    """

    def __init__(self, name: str) -> None:
        if not isinstance(name, str) or not name:
            raise InvalidInputError("Partition name must be a non-empty string")
        self.name = name
        self._parameter: TestParameter | None = None

    @property
    def parameter(self) -> TestParameter | None:
        return self._parameter

    @property
    def parameter_name(self) -> str | None:
        """Name of the owning parameter, or None for a detached partition."""
        return self._parameter.name if self._parameter is not None else None

    def check_owner(self, parameter: TestParameter) -> None:
        """Check the partition may be handed to ``parameter``.

        Raises:
            InvalidInputError: If the partition already belongs to a
                parameter that is not ``parameter`` or a copy of it.
        """
        current = self._parameter
        if current is not None and current.origin is not parameter.origin:
            raise InvalidInputError(
                f"Partition '{self.name}' already belongs to parameter '{current.name}'",
                partition=self.name,
            )

    def attach(self, parameter: TestParameter) -> None:
        """Set the owning parameter.

        Raises:
            InvalidInputError: If the partition already belongs to another
                parameter.
        """
        self.check_owner(parameter)
        self._parameter = parameter

    @property
    @abstractmethod
    def value(self) -> Any:
        """Produce the concrete value for this read."""

    def is_compatible_with(self, other: EquivalencePartition) -> bool:
        """Check both owning parameters accept this pair.

        A side without an owning parameter adds no constraint of its own.
        """
        if self._parameter is not None and not self._parameter.are_compatible(self, other):
            return False
        other_parameter = other.parameter
        if other_parameter is not None and not other_parameter.are_compatible(other, self):
            return False
        return True

    def __repr__(self) -> str:
        owner = self.parameter_name or ""
        return f"{owner}:{self.name}"


class SimpleValue(EquivalencePartition):
    """A partition that always yields the same value.

    Example:
        >>> SimpleValue("Windows").value
        'Windows'
        >>> SimpleValue(1024, name="small").name
        'small'
    """

    def __init__(self, value: Any, name: str | None = None) -> None:
        super().__init__(name if name is not None else str(value))
        self._value = value

    @property
    def value(self) -> Any:
        return self._value


class GenericPartition(EquivalencePartition):
    """A partition whose value is computed on every read.

    The producer is called synchronously and never cached; its side effects
    and thread-safety are the caller's business.
    """

    def __init__(self, name: str, producer: Callable[[], Any]) -> None:
        super().__init__(name)
        if not callable(producer):
            raise InvalidInputError(f"Producer for partition '{name}' must be callable")
        self._producer = producer

    @property
    def value(self) -> Any:
        return self._producer()


class _CycleCursor:
    """Lock-guarded counter that wraps at ``size``."""

    def __init__(self, size: int) -> None:
        self._size = size
        self._position = 0
        self._lock = threading.Lock()

    def advance(self) -> int:
        """Return the current position and step forward."""
        with self._lock:
            position = self._position
            self._position = (position + 1) % self._size
            return position


class CyclingPartition(EquivalencePartition):
    """A partition that cycles through equivalent values.

    The first read returns the default value; following reads walk the
    list in order, then wrap back to the default. The default is not
    repeated when the list already contains it.

    Reads may come from concurrent test executions; each read takes one
    cursor step atomically, so within one full cycle no position is
    skipped or handed out twice.

    Example:
        >>> chrome = CyclingPartition("Chrome", "116.0", ["116.0", "116.1", "116.2"])
        >>> [chrome.value for _ in range(4)]
        ['116.0', '116.1', '116.2', '116.0']
    """

    def __init__(self, name: str, default: Any, values: Iterable[Any] = ()) -> None:
        super().__init__(name)
        if values is None:
            raise InvalidInputError(f"Values for cycling partition '{name}' cannot be None")
        cycle = list(values)
        if default not in cycle:
            cycle.insert(0, default)
        else:
            cycle.remove(default)
            cycle.insert(0, default)
        self.default = default
        self._cycle = tuple(cycle)
        self._cursor = _CycleCursor(len(self._cycle))

    @property
    def values(self) -> tuple[Any, ...]:
        """The full cycle, default first."""
        return self._cycle

    @property
    def value(self) -> Any:
        return self._cycle[self._cursor.advance()]
