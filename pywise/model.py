"""Load parameter sets from YAML model files.

A model file lists parameters and the rules between them:

    parameters:
      - name: Browser
        values:
          - Chrome
          - name: Firefox
            default: "118.0.2"
            cycle: ["118.0.2", "118.0.3"]
          - Safari
      - name: OS
        values: [Windows, macOS, Linux]
      - name: Resolution
        values:
          - {name: small, value: "1024x768"}
          - {name: large, value: "1920x1080"}

    rules:
      - name: safari_needs_macos
        type: only_with
        when: {parameter: Browser, value: Safari}
        then: {parameter: OS, values: [macOS]}

Each rule is declared on the ``when`` parameter; rule propagation makes it
visible from the ``then`` parameter as well.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Literal, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from pywise.core.parameter import ParameterSet, TestParameter
from pywise.core.partitions import CyclingPartition, EquivalencePartition, SimpleValue
from pywise.core.rules import Rule, never_with, only_with
from pywise.errors import InvalidInputError, ModelLoadError

logger = logging.getLogger(__name__)

Scalar = Union[str, int, float, bool]


class ValueSpec(BaseModel):
    """A partition given as a mapping."""

    model_config = ConfigDict(extra="forbid")

    name: str
    value: Any = None
    default: Any = None
    cycle: list[Any] | None = None

    @model_validator(mode="after")
    def check_shape(self) -> ValueSpec:
        if self.cycle is not None and self.value is not None:
            raise ValueError(f"Value '{self.name}' cannot set both 'value' and 'cycle'")
        if self.default is not None and self.cycle is None:
            raise ValueError(f"Value '{self.name}' sets 'default' without 'cycle'")
        return self

    def to_partition(self) -> EquivalencePartition:
        if self.cycle is not None:
            default = self.default if self.default is not None else (
                self.cycle[0] if self.cycle else self.name
            )
            return CyclingPartition(self.name, default, self.cycle)
        return SimpleValue(self.value if self.value is not None else self.name, name=self.name)


class ParameterSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1)
    values: list[Union[ValueSpec, Scalar]]

    def to_partitions(self) -> list[EquivalencePartition]:
        partitions: list[EquivalencePartition] = []
        for value in self.values:
            if isinstance(value, ValueSpec):
                partitions.append(value.to_partition())
            else:
                partitions.append(SimpleValue(value))
        return partitions


class WhenSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    parameter: str
    value: str


class ThenSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    parameter: str
    values: list[str]


class RuleSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = ""
    type: Literal["only_with", "never_with"]
    description: str = ""
    when: WhenSpec
    then: ThenSpec

    def to_rule(self) -> Rule:
        factory = only_with if self.type == "only_with" else never_with
        return factory(
            self.when.parameter,
            self.when.value,
            self.then.parameter,
            self.then.values,
            name=self.name,
            description=self.description,
        )


class ModelSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    parameters: list[ParameterSpec] = Field(min_length=1)
    rules: list[RuleSpec] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_references(self) -> ModelSpec:
        values_by_parameter: dict[str, set[str]] = {}
        for parameter in self.parameters:
            values_by_parameter[parameter.name] = {
                v.name if isinstance(v, ValueSpec) else str(v) for v in parameter.values
            }
        for rule in self.rules:
            for ref, names in (
                (rule.when.parameter, [rule.when.value]),
                (rule.then.parameter, rule.then.values),
            ):
                if ref not in values_by_parameter:
                    raise ValueError(f"Rule '{rule.name or rule.type}' references unknown parameter '{ref}'")
                unknown = set(names) - values_by_parameter[ref]
                if unknown:
                    raise ValueError(
                        f"Rule '{rule.name or rule.type}' references unknown values of '{ref}': "
                        f"{sorted(unknown)}"
                    )
        return self


def build_parameter_set(spec: ModelSpec) -> ParameterSet:
    """Turn a validated model into a ParameterSet."""
    rules_by_parameter: dict[str, list[Rule]] = {}
    for rule_spec in spec.rules:
        rules_by_parameter.setdefault(rule_spec.when.parameter, []).append(rule_spec.to_rule())

    return ParameterSet(
        TestParameter(
            parameter.name,
            parameter.to_partitions(),
            rules_by_parameter.get(parameter.name, []),
        )
        for parameter in spec.parameters
    )


def parse_model(data: dict[str, Any]) -> ParameterSet:
    """Validate a model mapping and build its ParameterSet.

    Raises:
        ModelLoadError: If the mapping does not describe a valid model.
    """
    try:
        spec = ModelSpec.model_validate(data)
        return build_parameter_set(spec)
    except ValidationError as e:
        raise ModelLoadError(f"Invalid model: {e}", cause=e) from e
    except InvalidInputError as e:
        raise ModelLoadError(f"Invalid model: {e.message}", cause=e) from e


def load_model(path: str | Path) -> ParameterSet:
    """Read a YAML model file.

    Raises:
        ModelLoadError: If the file is missing, not YAML, or invalid.
    """
    path = Path(path)
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ModelLoadError(f"Cannot read model file {path}: {e}", cause=e, path=path) from e
    except yaml.YAMLError as e:
        raise ModelLoadError(f"Cannot parse model file {path}: {e}", cause=e, path=path) from e

    if not isinstance(data, dict):
        raise ModelLoadError(f"Model file {path} must contain a mapping", path=path)

    parameter_set = parse_model(data)
    logger.info(f"Loaded model {path}: {parameter_set!r}")
    return parameter_set
