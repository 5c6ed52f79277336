"""Generator entry points and the fluent input builder.

TestGenerator propagates rules once and then runs any algorithm against
the propagated parameter set. The module-level functions wrap the common
cases.

Example:
    >>> from pywise import TestParameter, SimpleValue, generate_pairwise, only_with
    >>>
    >>> browser = TestParameter(
    ...     "Browser",
    ...     [SimpleValue("Chrome"), SimpleValue("Firefox"), SimpleValue("Safari")],
    ...     [only_with("Browser", "Safari", "OS", ["macOS"])],
    ... )
    >>> os_ = TestParameter(
    ...     "OS", [SimpleValue("Windows"), SimpleValue("macOS"), SimpleValue("Linux")]
    ... )
    >>> table = generate_pairwise([browser, os_])
    >>>
    >>> # Or with the builder
    >>> table = builder().parameter(browser).parameter(os_).generate_combinatorial(limit=5)
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from pywise.algo.base import GenerationAlgorithm
from pywise.algo.combinatorial import CombinatorialAlgorithm, validate_limit
from pywise.algo.legacy import LegacyPairwiseAlgorithm
from pywise.algo.pairwise import DEFAULT_JUMP, PairwiseAlgorithm
from pywise.core.combination import CombinationTable
from pywise.core.parameter import ParameterSet, TestParameter, as_parameter_set
from pywise.core.rules import RulePropagator
from pywise.errors import InvalidInputError

logger = logging.getLogger(__name__)


class TestGenerator:
    """Runs generation algorithms over a rule-propagated parameter set.

    Attributes:
        original: The parameter set as given.
        parameter_set: The propagated copy algorithms work on.
    """

    __test__ = False  # not a pytest test class

    def __init__(self, parameters: ParameterSet | Iterable[TestParameter]) -> None:
        self.original = as_parameter_set(parameters)
        if len(self.original) == 0:
            raise InvalidInputError("Test input must contain at least one parameter")
        self.parameter_set = RulePropagator().propagate(self.original)
        self.result = CombinationTable()

    @property
    def span(self) -> int:
        """Size of the full Cartesian product, ignoring rules."""
        return self.parameter_set.span

    def generate(self, algorithm: GenerationAlgorithm) -> CombinationTable:
        if algorithm is None:
            raise InvalidInputError("algorithm must not be None")
        logger.info(f"Generating combinations with algorithm: {algorithm.name}")
        self.result = algorithm.generate(self.parameter_set)
        logger.info(f"Generated {len(self.result)} combinations")
        return self.result


def generate_pairwise(
    parameters: ParameterSet | Iterable[TestParameter],
    algorithm: PairwiseAlgorithm | LegacyPairwiseAlgorithm | None = None,
) -> CombinationTable:
    """Generate a pairwise cover of ``parameters``.

    Raises:
        InvalidInputError: If ``parameters`` is None or empty.
    """
    return TestGenerator(parameters).generate(algorithm or PairwiseAlgorithm())


def generate_combinatorial(
    parameters: ParameterSet | Iterable[TestParameter],
    limit: int | None = None,
    seed: int | None = None,
) -> CombinationTable:
    """Generate every valid combination of ``parameters``, capped at ``limit``.

    Raises:
        InvalidInputError: If ``parameters`` is None or empty, or ``limit``
            is below one.
    """
    validate_limit(limit)
    return TestGenerator(parameters).generate(CombinatorialAlgorithm(limit=limit, seed=seed))


class InputBuilder:
    """Fluent builder for parameter sets.

    Example:
        >>> table = (
        ...     builder()
        ...     .parameter(browser)
        ...     .parameter(os_)
        ...     .generate_pairwise(jump=2, seed=11)
        ... )
    """

    def __init__(self) -> None:
        self._parameter_set = ParameterSet()

    def parameter(self, parameter: TestParameter) -> InputBuilder:
        if parameter is None:
            raise InvalidInputError("parameter must not be None")
        self._parameter_set.add(parameter)
        logger.debug(f"Added parameter: {parameter.name}")
        return self

    def parameters(self, *parameters: TestParameter | Iterable[TestParameter]) -> InputBuilder:
        """Add parameters given one by one or as a single iterable."""
        if len(parameters) == 1 and not isinstance(parameters[0], TestParameter):
            if parameters[0] is None:
                raise InvalidInputError("parameters must not be None")
            parameters = tuple(parameters[0])
        for parameter in parameters:
            self.parameter(parameter)
        return self

    def build(self) -> ParameterSet:
        return ParameterSet(self._parameter_set)

    def generate_pairwise(self, jump: int = DEFAULT_JUMP, seed: int | None = None) -> CombinationTable:
        return generate_pairwise(self.build(), PairwiseAlgorithm(jump=jump, seed=seed))

    def generate_legacy_pairwise(
        self, jump: int = DEFAULT_JUMP, seed: int | None = None
    ) -> CombinationTable:
        return generate_pairwise(self.build(), LegacyPairwiseAlgorithm(jump=jump, seed=seed))

    def generate_combinatorial(
        self, limit: int | None = None, seed: int | None = None
    ) -> CombinationTable:
        return generate_combinatorial(self.build(), limit=limit, seed=seed)


def builder() -> InputBuilder:
    """Start a fluent InputBuilder."""
    return InputBuilder()


def with_parameters(*parameters: TestParameter | Iterable[TestParameter]) -> InputBuilder:
    """Start an InputBuilder pre-populated with ``parameters``."""
    return builder().parameters(*parameters)
