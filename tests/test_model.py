"""Tests for YAML model loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from pywise import CyclingPartition, ModelLoadError, generate_combinatorial
from pywise.model import load_model, parse_model


def _model(**overrides):
    data = {
        "parameters": [
            {"name": "Browser", "values": ["Chrome", "Firefox", "Safari"]},
            {"name": "OS", "values": ["Windows", "macOS", "Linux"]},
        ],
        "rules": [
            {
                "name": "safari_needs_macos",
                "type": "only_with",
                "when": {"parameter": "Browser", "value": "Safari"},
                "then": {"parameter": "OS", "values": ["macOS"]},
            }
        ],
    }
    data.update(overrides)
    return data


# ============================================================
# parse_model Tests
# ============================================================


class TestParseModel:
    """Tests for building parameter sets from mappings."""

    def test_parameters_and_rules(self):
        ps = parse_model(_model())
        assert ps.names == ["Browser", "OS"]
        assert [p.name for p in ps.get("Browser").partitions] == ["Chrome", "Firefox", "Safari"]
        assert len(ps.get("Browser").dependencies) == 1
        assert ps.get("OS").dependencies == ()

    def test_rule_enforced(self):
        table = generate_combinatorial(parse_model(_model()))
        assert len(table) == 7
        assert "Safari|Windows" not in table

    def test_never_with(self):
        rules = [
            {
                "type": "never_with",
                "when": {"parameter": "Browser", "value": "Safari"},
                "then": {"parameter": "OS", "values": ["Windows", "Linux"]},
            }
        ]
        table = generate_combinatorial(parse_model(_model(rules=rules)))
        assert len(table) == 7

    def test_value_mappings(self):
        ps = parse_model(
            {
                "parameters": [
                    {
                        "name": "Resolution",
                        "values": [
                            {"name": "small", "value": "1024x768"},
                            {"name": "chrome", "default": "116.0", "cycle": ["116.0", "116.1"]},
                            {"name": "plain"},
                            1080,
                        ],
                    }
                ]
            }
        )
        resolution = ps.get("Resolution")
        assert resolution.get_partition("small").value == "1024x768"
        assert resolution.get_partition("plain").value == "plain"
        assert resolution.get_partition("1080").value == 1080
        chrome = resolution.get_partition("chrome")
        assert isinstance(chrome, CyclingPartition)
        assert chrome.values == ("116.0", "116.1")

    def test_no_rules(self):
        ps = parse_model({"parameters": [{"name": "A", "values": ["a"]}]})
        assert len(ps) == 1

    @pytest.mark.parametrize(
        "data, message",
        [
            ({}, "parameters"),
            ({"parameters": []}, "parameters"),
            ({"parameters": [{"name": "", "values": ["a"]}]}, "name"),
            ({"parameters": [{"name": "A", "values": ["a", "a"]}]}, "duplicate"),
            ({"parameters": [{"name": "A", "values": ["a"]}, {"name": "A", "values": ["b"]}]}, "Duplicate"),
            ({"parameters": [{"name": "A", "values": ["a"], "extra": 1}]}, "extra"),
        ],
    )
    def test_invalid_parameters(self, data, message):
        with pytest.raises(ModelLoadError, match=message):
            parse_model(data)

    def test_unknown_rule_parameter(self):
        rules = [
            {
                "type": "only_with",
                "when": {"parameter": "Browser", "value": "Safari"},
                "then": {"parameter": "Platform", "values": ["macOS"]},
            }
        ]
        with pytest.raises(ModelLoadError, match="unknown parameter 'Platform'"):
            parse_model(_model(rules=rules))

    def test_unknown_rule_value(self):
        rules = [
            {
                "type": "only_with",
                "when": {"parameter": "Browser", "value": "Opera"},
                "then": {"parameter": "OS", "values": ["macOS"]},
            }
        ]
        with pytest.raises(ModelLoadError, match="Opera"):
            parse_model(_model(rules=rules))

    def test_unknown_rule_type(self):
        rules = [
            {
                "type": "sometimes_with",
                "when": {"parameter": "Browser", "value": "Safari"},
                "then": {"parameter": "OS", "values": ["macOS"]},
            }
        ]
        with pytest.raises(ModelLoadError):
            parse_model(_model(rules=rules))

    def test_value_and_cycle_conflict(self):
        data = {"parameters": [{"name": "A", "values": [{"name": "a", "value": 1, "cycle": [1, 2]}]}]}
        with pytest.raises(ModelLoadError, match="both"):
            parse_model(data)


# ============================================================
# load_model Tests
# ============================================================


class TestLoadModel:
    """Tests for reading model files."""

    def test_load(self, model_file):
        ps = load_model(model_file)
        assert ps.names == ["Browser", "OS", "Resolution"]
        assert len(generate_combinatorial(ps)) == 14

    def test_missing_file(self, tmp_path):
        with pytest.raises(ModelLoadError, match="Cannot read"):
            load_model(tmp_path / "missing.yaml")

    def test_bad_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("parameters: [\n")
        with pytest.raises(ModelLoadError, match="Cannot parse"):
            load_model(path)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ModelLoadError, match="mapping"):
            load_model(path)

    def test_error_carries_path(self, tmp_path):
        path = tmp_path / "missing.yaml"
        with pytest.raises(ModelLoadError) as exc_info:
            load_model(path)
        assert exc_info.value.context["path"] == path


def test_bundled_example_loads():
    path = Path(__file__).resolve().parent.parent / "examples" / "browsers.yaml"
    ps = load_model(path)
    assert ps.names == ["Browser", "OS", "Resolution", "Locale"]
    table = generate_combinatorial(ps)
    # 4*3*2*3 = 72, minus Safari off macOS (2*2*3) and Edge on Linux (1*2*3)
    assert len(table) == 54
