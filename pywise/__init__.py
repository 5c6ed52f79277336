"""pywise - constraint-aware pairwise and combinatorial test generation.

pywise builds test-input combinations from parameters that each hold
several interchangeable equivalence classes ("partitions"), while honoring
compatibility rules between partitions of different parameters.

Key Features:
    - Pairwise: a small set of combinations covering every compatible pair
    - Combinatorial: every valid combination, optionally capped
    - Rules: plain callables, propagated to every parameter they inspect
    - Cycling and computed partitions for varied concrete values
    - Export to pytest parametrize, JSON and CSV

Example:
    >>> from pywise import SimpleValue, TestParameter, generate_pairwise, only_with
    >>>
    >>> browser = TestParameter(
    ...     "Browser",
    ...     [SimpleValue("Chrome"), SimpleValue("Firefox"), SimpleValue("Safari")],
    ...     [only_with("Browser", "Safari", "OS", ["macOS"])],
    ... )
    >>> os_ = TestParameter(
    ...     "OS",
    ...     [SimpleValue("Windows"), SimpleValue("macOS"), SimpleValue("Linux")],
    ... )
    >>> table = generate_pairwise([browser, os_])
    >>> for row in table.as_data_provider():
    ...     print(row)

Core Models:
    SimpleValue / GenericPartition / CyclingPartition: value partitions
    TestParameter: a named set of partitions plus its rules
    ParameterSet: the ordered parameters a generator works on
    Combination: one (possibly partial) test case
    CombinationTable: ordered, deduplicated result set

Algorithms:
    PairwiseAlgorithm: seed-and-complete pairwise cover
    LegacyPairwiseAlgorithm: merge-based pairwise cover
    CombinatorialAlgorithm: exhaustive search with optional limit

Error Handling:
    PyWiseError: Base exception for all pywise errors
    InvalidInputError: Rejected construction arguments
    NoCandidatesError: Generation cannot make progress
"""

from pywise.algo import (
    CombinatorialAlgorithm,
    CoverageStats,
    GenerationAlgorithm,
    LegacyPairwiseAlgorithm,
    PairwiseAlgorithm,
    coverage_stats,
    uncovered_pairs,
)
from pywise.core import (
    Combination,
    CombinationTable,
    CompatibilityPredicate,
    CyclingPartition,
    EquivalencePartition,
    GenericPartition,
    ParameterSet,
    Rule,
    RulePropagator,
    SimpleValue,
    TestParameter,
    never_with,
    only_with,
    propagate_rules,
)
from pywise.errors import (
    ConfigError,
    ErrorCode,
    InconsistentCombinationError,
    InvalidInputError,
    ModelLoadError,
    NoCandidatesError,
    PyWiseError,
)
from pywise.generator import (
    InputBuilder,
    TestGenerator,
    builder,
    generate_combinatorial,
    generate_pairwise,
    with_parameters,
)

__version__ = "0.1.0"

__all__ = [
    # Partitions
    "EquivalencePartition",
    "SimpleValue",
    "GenericPartition",
    "CyclingPartition",
    # Parameters and rules
    "TestParameter",
    "ParameterSet",
    "CompatibilityPredicate",
    "Rule",
    "RulePropagator",
    "only_with",
    "never_with",
    "propagate_rules",
    # Combinations
    "Combination",
    "CombinationTable",
    # Algorithms
    "GenerationAlgorithm",
    "PairwiseAlgorithm",
    "LegacyPairwiseAlgorithm",
    "CombinatorialAlgorithm",
    "CoverageStats",
    "coverage_stats",
    "uncovered_pairs",
    # Generation
    "TestGenerator",
    "InputBuilder",
    "builder",
    "with_parameters",
    "generate_pairwise",
    "generate_combinatorial",
    # Errors
    "PyWiseError",
    "ErrorCode",
    "InvalidInputError",
    "ConfigError",
    "ModelLoadError",
    "InconsistentCombinationError",
    "NoCandidatesError",
]
