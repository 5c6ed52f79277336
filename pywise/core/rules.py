"""Compatibility rules and rule propagation.

A rule is any callable ``(partition_a, partition_b) -> bool`` that returns
True when the two partitions may appear in the same combination. Rules are
attached to one parameter when declared; RulePropagator then attaches each
rule to every other parameter it inspects, so a compatibility check gives
the same answer no matter which side of a pair is asked first.

Example:
    >>> from pywise.core.rules import RulePropagator, only_with
    >>>
    >>> safari_on_mac = only_with("Browser", "Safari", "OS", ["macOS"])
    >>> browser = TestParameter("Browser", partitions, [safari_on_mac])
    >>> propagated = RulePropagator().propagate(ParameterSet([browser, os_, device]))
    >>> safari_on_mac in propagated.get("OS").dependencies
    True
    >>> safari_on_mac in propagated.get("Device").dependencies
    False
"""

from __future__ import annotations

import logging
from collections.abc import Hashable, Iterable
from dataclasses import dataclass, field

from pywise.core.parameter import (
    RULE_ERRORS,
    CompatibilityPredicate,
    ParameterSet,
    TestParameter,
    rule_name,
)
from pywise.core.partitions import EquivalencePartition

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class Rule:
    """A named compatibility predicate.

    Attributes:
        name: Identifier used in logs.
        predicate: Function returning True for compatible partitions.
        description: Why this rule exists.
        parameters: Optional names of the parameters this rule inspects.
            When given, propagation attaches the rule to exactly these
            parameters instead of probing for them.

    Example:
        >>> rule = Rule(
        ...     name="no_ie_on_linux",
        ...     predicate=lambda a, b: not ({a.name, b.name} == {"IE", "Linux"}),
        ...     parameters=["Browser", "OS"],
        ... )
    """

    name: str
    predicate: CompatibilityPredicate
    description: str = ""
    parameters: list[str] | None = field(default=None)

    def __call__(self, first: EquivalencePartition, second: EquivalencePartition) -> bool:
        return bool(self.predicate(first, second))

    def __repr__(self) -> str:
        return f"Rule({self.name!r})"


def _matches(partition: EquivalencePartition, parameter: str, names: Iterable[Hashable]) -> bool:
    return partition.parameter_name == parameter and partition.name in names


def only_with(
    parameter: str,
    value: str,
    other_parameter: str,
    allowed: Iterable[str],
    name: str = "",
    description: str = "",
) -> Rule:
    """Create a rule: ``parameter=value`` may only pair with ``allowed`` values.

    The rule reads both argument orders, so it can sit on either parameter.

    Example:
        >>> rule = only_with("Browser", "Safari", "OS", ["macOS"])
    """
    allowed_names = frozenset(allowed)

    def predicate(first: EquivalencePartition, second: EquivalencePartition) -> bool:
        for a, b in ((first, second), (second, first)):
            if _matches(a, parameter, (value,)) and b.parameter_name == other_parameter:
                return b.name in allowed_names
        return True

    return Rule(
        name=name or f"{parameter}={value} only with {other_parameter} in {sorted(allowed_names)}",
        predicate=predicate,
        description=description,
        parameters=[parameter, other_parameter],
    )


def never_with(
    parameter: str,
    value: str,
    other_parameter: str,
    excluded: Iterable[str],
    name: str = "",
    description: str = "",
) -> Rule:
    """Create a rule: ``parameter=value`` never pairs with ``excluded`` values.

    Example:
        >>> rule = never_with("Browser", "IE", "OS", ["macOS", "Linux"])
    """
    excluded_names = frozenset(excluded)

    def predicate(first: EquivalencePartition, second: EquivalencePartition) -> bool:
        for a, b in ((first, second), (second, first)):
            if _matches(a, parameter, (value,)) and b.parameter_name == other_parameter:
                return b.name not in excluded_names
        return True

    return Rule(
        name=name or f"{parameter}={value} never with {other_parameter} in {sorted(excluded_names)}",
        predicate=predicate,
        description=description,
        parameters=[parameter, other_parameter],
    )


class RulePropagator:
    """Attaches every rule to each parameter whose partitions it inspects.

    Rules declared as ``Rule`` objects with ``parameters`` are attached to
    those parameters directly. Any other rule is probed: it inspects a
    target parameter if some pair of (source, target) partitions, tried in
    both argument orders, is rejected.

    propagate() returns a new ParameterSet of parameter copies whose rule
    lists are supersets of the originals. The copies share the original
    partition objects and take over their back-references; the input
    parameters keep their own rule lists.
    """

    def propagate(self, parameter_set: ParameterSet) -> ParameterSet:
        """Return a new parameter set with rules visible from both sides."""
        logger.info(f"Propagating rules across {len(parameter_set)} parameters")

        additions: dict[str, list[CompatibilityPredicate]] = {}
        for source in parameter_set:
            for rule in source.dependencies:
                for target in self._targets(rule, source, parameter_set):
                    pending = additions.setdefault(target.name, [])
                    if rule not in target.dependencies and rule not in pending:
                        pending.append(rule)
                        logger.debug(
                            f"Rule '{rule_name(rule)}' from {source.name} added to {target.name}"
                        )

        result = ParameterSet()
        for parameter in parameter_set:
            extra = additions.get(parameter.name, [])
            result.add(parameter.with_dependencies(list(parameter.dependencies) + extra))

        total = sum(len(rules) for rules in additions.values())
        logger.info(f"Propagation attached {total} rule(s)")
        return result

    def _targets(
        self,
        rule: CompatibilityPredicate,
        source: TestParameter,
        parameter_set: ParameterSet,
    ) -> list[TestParameter]:
        declared = getattr(rule, "parameters", None) if isinstance(rule, Rule) else None
        if declared:
            targets = []
            for name in declared:
                if name == source.name:
                    continue
                if name not in parameter_set.names:
                    logger.debug(f"Rule '{rule_name(rule)}' names unknown parameter '{name}'")
                    continue
                targets.append(parameter_set.get(name))
            return targets

        return [
            target
            for target in parameter_set
            if target is not source and self.inspects(rule, source, target)
        ]

    def inspects(
        self,
        rule: CompatibilityPredicate,
        source: TestParameter,
        target: TestParameter,
    ) -> bool:
        """Probe whether ``rule`` rejects any pair of source/target partitions."""
        for sv in source.partitions:
            for tv in target.partitions:
                for first, second in ((sv, tv), (tv, sv)):
                    try:
                        if not rule(first, second):
                            logger.debug(
                                f"Rule '{rule_name(rule)}' on {source.name} inspects "
                                f"{target.name}: rule({first!r}, {second!r}) -> False"
                            )
                            return True
                    except RULE_ERRORS as e:
                        logger.debug(
                            f"Rule '{rule_name(rule)}' raised {type(e).__name__} probing "
                            f"{target.name}; treating it as inspecting that parameter"
                        )
                        return True
        return False


def propagate_rules(parameter_set: ParameterSet) -> ParameterSet:
    """Shortcut for ``RulePropagator().propagate(parameter_set)``."""
    return RulePropagator().propagate(parameter_set)
