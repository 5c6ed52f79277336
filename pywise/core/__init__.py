"""Data model: partitions, parameters, rules and combinations."""

from pywise.core.combination import Combination, CombinationTable
from pywise.core.parameter import (
    CompatibilityPredicate,
    ParameterSet,
    TestParameter,
    as_parameter_set,
)
from pywise.core.partitions import (
    CyclingPartition,
    EquivalencePartition,
    GenericPartition,
    SimpleValue,
)
from pywise.core.rules import Rule, RulePropagator, never_with, only_with, propagate_rules

__all__ = [
    "EquivalencePartition",
    "SimpleValue",
    "GenericPartition",
    "CyclingPartition",
    "TestParameter",
    "ParameterSet",
    "CompatibilityPredicate",
    "as_parameter_set",
    "Rule",
    "RulePropagator",
    "only_with",
    "never_with",
    "propagate_rules",
    "Combination",
    "CombinationTable",
]
