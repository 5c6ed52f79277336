"""Test parameters and the parameter set they form.

A TestParameter is a named, ordered group of value partitions plus the
compatibility rules ("dependencies") that constrain which partitions of
other parameters its own partitions may be combined with.

Example:
    >>> from pywise.core.parameter import ParameterSet, TestParameter
    >>> from pywise.core.partitions import SimpleValue
    >>>
    >>> def safari_needs_macos(a, b):
    ...     if a.name == "Safari" and b.parameter_name == "OS":
    ...         return b.name == "macOS"
    ...     return True
    >>>
    >>> browser = TestParameter(
    ...     "Browser",
    ...     [SimpleValue("Chrome"), SimpleValue("Safari")],
    ...     [safari_needs_macos],
    ... )
    >>> os_ = TestParameter("OS", [SimpleValue("Windows"), SimpleValue("macOS")])
    >>> ParameterSet([browser, os_]).span
    4
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator, Sequence

from pywise.core.partitions import EquivalencePartition
from pywise.errors import InvalidInputError

logger = logging.getLogger(__name__)

# A rule receives two partitions and returns True if they may appear together.
CompatibilityPredicate = Callable[[EquivalencePartition, EquivalencePartition], bool]

# Exceptions a misbehaving rule may raise; they count as "incompatible".
RULE_ERRORS = (KeyError, TypeError, ValueError, AttributeError)


def rule_name(rule: CompatibilityPredicate) -> str:
    """Best-effort display name for a rule."""
    return getattr(rule, "name", None) or getattr(rule, "__name__", None) or repr(rule)


class TestParameter:
    """A named set of value partitions plus the rules that apply to it.

    Attributes:
        name: Unique identifier within a ParameterSet.
        partitions: Ordered tuple of partitions. Order only matters for
            determinism and debugging.
        dependencies: Ordered tuple of compatibility rules.
        origin: The parameter this one was copied from by
            ``with_dependencies``, or itself.

    Raises:
        InvalidInputError: If the name is empty, the partition list or rule
            list is None, partition names repeat, or a partition already
            belongs to an unrelated parameter.
    """

    __test__ = False  # not a pytest test class

    def __init__(
        self,
        name: str,
        partitions: Iterable[EquivalencePartition],
        dependencies: Iterable[CompatibilityPredicate] = (),
        *,
        _origin: TestParameter | None = None,
    ) -> None:
        if not isinstance(name, str) or not name:
            raise InvalidInputError("Parameter name cannot be empty")
        if partitions is None:
            raise InvalidInputError(f"Partition list for parameter '{name}' cannot be None")
        if dependencies is None:
            raise InvalidInputError(f"Rule list for parameter '{name}' cannot be None")

        self.name = name
        self._partitions = tuple(partitions)
        self._dependencies = tuple(dependencies)
        self._origin = _origin if _origin is not None else self

        names = [p.name for p in self._partitions]
        if len(names) != len(set(names)):
            duplicates = sorted({n for n in names if names.count(n) > 1})
            raise InvalidInputError(
                f"Parameter '{name}' contains duplicate partition names: {duplicates}"
            )
        for rule in self._dependencies:
            if not callable(rule):
                raise InvalidInputError(f"Rule {rule!r} on parameter '{name}' is not callable")

        # Nothing is attached until every partition is known to be free.
        for partition in self._partitions:
            partition.check_owner(self)
        for partition in self._partitions:
            partition.attach(self)

    @property
    def partitions(self) -> tuple[EquivalencePartition, ...]:
        return self._partitions

    @property
    def origin(self) -> TestParameter:
        return self._origin

    @property
    def dependencies(self) -> tuple[CompatibilityPredicate, ...]:
        return self._dependencies

    @property
    def size(self) -> int:
        """Number of partitions."""
        return len(self._partitions)

    def get_partition(self, name: str) -> EquivalencePartition:
        """Get a partition by name.

        Raises:
            KeyError: If no partition has that name.
        """
        for partition in self._partitions:
            if partition.name == name:
                return partition
        raise KeyError(
            f"Partition '{name}' not found in parameter '{self.name}'. "
            f"Available: {[p.name for p in self._partitions]}"
        )

    def are_compatible(self, first: EquivalencePartition, second: EquivalencePartition) -> bool:
        """Apply every rule of this parameter to ``(first, second)``.

        A rule that raises is logged and treated as rejecting the pair.
        """
        if first is None or second is None:
            return False
        for rule in self._dependencies:
            try:
                if not rule(first, second):
                    return False
            except RULE_ERRORS as e:
                logger.warning(
                    f"Rule '{rule_name(rule)}' on '{self.name}' raised {type(e).__name__}: {e}. "
                    f"Treating {first!r} / {second!r} as incompatible."
                )
                return False
        return True

    def with_dependencies(self, dependencies: Iterable[CompatibilityPredicate]) -> TestParameter:
        """Return a copy of this parameter with the given rules.

        The copy holds the same partition objects and takes over their
        back-references, so rules that compare partitions by identity keep
        working and compatibility checks go through the new rule list.
        """
        return TestParameter(self.name, self._partitions, dependencies, _origin=self._origin)

    def __repr__(self) -> str:
        return f"TestParameter({self.name!r}, partitions={[p.name for p in self._partitions]})"


class ParameterSet:
    """The ordered collection of parameters a generator works on.

    Position in the set is the slot index in every Combination built from
    it.

    Raises:
        InvalidInputError: If the collection is None, holds something other
            than TestParameter, or repeats a parameter name.
    """

    def __init__(self, parameters: Iterable[TestParameter] = ()) -> None:
        if parameters is None:
            raise InvalidInputError("Parameter collection cannot be None")
        self._parameters: list[TestParameter] = []
        for parameter in parameters:
            self.add(parameter)

    def add(self, parameter: TestParameter) -> None:
        """Append a parameter."""
        if not isinstance(parameter, TestParameter):
            raise InvalidInputError(f"Expected a TestParameter, got {type(parameter).__name__}")
        if any(p.name == parameter.name for p in self._parameters):
            raise InvalidInputError(f"Duplicate parameter name: '{parameter.name}'")
        self._parameters.append(parameter)

    @property
    def parameters(self) -> Sequence[TestParameter]:
        return tuple(self._parameters)

    @property
    def names(self) -> list[str]:
        return [p.name for p in self._parameters]

    @property
    def span(self) -> int:
        """Size of the full Cartesian product, ignoring rules."""
        if not self._parameters:
            return 0
        result = 1
        for parameter in self._parameters:
            result *= parameter.size
        return result

    def get(self, name: str) -> TestParameter:
        """Get a parameter by name.

        Raises:
            KeyError: If no parameter has that name.
        """
        for parameter in self._parameters:
            if parameter.name == name:
                return parameter
        raise KeyError(f"Parameter '{name}' not found. Available: {self.names}")

    def index_of(self, parameter: TestParameter) -> int:
        for index, candidate in enumerate(self._parameters):
            if candidate is parameter:
                return index
        raise KeyError(f"Parameter '{parameter.name}' is not part of this set")

    def __len__(self) -> int:
        return len(self._parameters)

    def __iter__(self) -> Iterator[TestParameter]:
        return iter(self._parameters)

    def __getitem__(self, index: int) -> TestParameter:
        return self._parameters[index]

    def __repr__(self) -> str:
        dims = ", ".join(f"{p.name}({p.size})" for p in self._parameters)
        return f"ParameterSet([{dims}], span={self.span})"


def as_parameter_set(parameters: ParameterSet | Iterable[TestParameter]) -> ParameterSet:
    """Coerce a ParameterSet or an iterable of parameters into a ParameterSet."""
    if parameters is None:
        raise InvalidInputError("Parameter collection cannot be None")
    if isinstance(parameters, ParameterSet):
        return parameters
    return ParameterSet(parameters)
