"""Tests for generator settings."""

from __future__ import annotations

import pytest

from pywise import ConfigError
from pywise.config import GeneratorSettings, load_settings


class TestGeneratorSettings:
    """Tests for GeneratorSettings defaults and validation."""

    def test_defaults(self):
        settings = GeneratorSettings()
        assert settings.algorithm == "pairwise"
        assert settings.jump == 3
        assert settings.seed is None
        assert settings.limit is None
        assert settings.output_format == "table"
        assert settings.log_level == "WARNING"
        assert settings.verbose is False

    def test_values_normalized(self):
        settings = GeneratorSettings(algorithm="LEGACY", output_format="JSON", log_level="debug")
        assert settings.algorithm == "legacy"
        assert settings.output_format == "json"
        assert settings.log_level == "DEBUG"

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("PYWISE_JUMP", "5")
        monkeypatch.setenv("PYWISE_SEED", "42")
        settings = GeneratorSettings()
        assert settings.jump == 5
        assert settings.seed == 42

    @pytest.mark.parametrize(
        "field, value",
        [
            ("algorithm", "random"),
            ("output_format", "xml"),
            ("log_level", "LOUD"),
            ("jump", 0),
            ("limit", 0),
        ],
    )
    def test_invalid_values(self, field, value):
        with pytest.raises(ValueError):
            GeneratorSettings(**{field: value})


class TestLoadSettings:
    """Tests for load_settings."""

    def test_no_file(self):
        assert load_settings().jump == 3

    def test_missing_file_uses_defaults(self, tmp_path):
        assert load_settings(tmp_path / "nope.yaml").algorithm == "pairwise"

    def test_yaml_file(self, tmp_path):
        path = tmp_path / "pywise.yaml"
        path.write_text("algorithm: combinatorial\nlimit: 10\nseed: 7\n")
        settings = load_settings(path)
        assert settings.algorithm == "combinatorial"
        assert settings.limit == 10
        assert settings.seed == 7

    def test_empty_yaml_file(self, tmp_path):
        path = tmp_path / "pywise.yaml"
        path.write_text("")
        assert load_settings(path).jump == 3

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        path = tmp_path / "pywise.yaml"
        path.write_text("jump: 2\nseed: 1\n")
        monkeypatch.setenv("PYWISE_JUMP", "9")
        settings = load_settings(path)
        assert settings.jump == 9
        assert settings.seed == 1

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "pywise.yaml"
        path.write_text("jump: [1, 2\n")
        with pytest.raises(ConfigError, match="Could not parse"):
            load_settings(path)

    def test_non_mapping(self, tmp_path):
        path = tmp_path / "pywise.yaml"
        path.write_text("- just\n- a list\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_settings(path)

    def test_invalid_value(self, tmp_path):
        path = tmp_path / "pywise.yaml"
        path.write_text("jump: 0\n")
        with pytest.raises(ConfigError, match="Invalid settings") as exc_info:
            load_settings(path)
        assert exc_info.value.cause is not None
