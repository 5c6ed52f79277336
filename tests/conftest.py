"""Shared fixtures for pywise tests."""

from __future__ import annotations

import os

import pytest

from pywise import ParameterSet, SimpleValue, TestParameter, only_with


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Strip PYWISE_* variables so settings tests start from defaults."""
    for key in list(os.environ):
        if key.startswith("PYWISE_"):
            monkeypatch.delenv(key)
    yield


@pytest.fixture
def browser() -> TestParameter:
    return TestParameter(
        "Browser",
        [SimpleValue("Chrome"), SimpleValue("Firefox"), SimpleValue("Safari")],
        [only_with("Browser", "Safari", "OS", ["macOS"], name="safari_needs_macos")],
    )


@pytest.fixture
def os_param() -> TestParameter:
    return TestParameter("OS", [SimpleValue("Windows"), SimpleValue("macOS"), SimpleValue("Linux")])


@pytest.fixture
def resolution() -> TestParameter:
    return TestParameter(
        "Resolution",
        [SimpleValue("1024x768", name="small"), SimpleValue("1920x1080", name="large")],
    )


@pytest.fixture
def browser_os(browser, os_param) -> ParameterSet:
    return ParameterSet([browser, os_param])


@pytest.fixture
def browser_os_resolution(browser, os_param, resolution) -> ParameterSet:
    return ParameterSet([browser, os_param, resolution])


@pytest.fixture
def model_file(tmp_path):
    """A small YAML model on disk."""
    path = tmp_path / "model.yaml"
    path.write_text(
        """
parameters:
  - name: Browser
    values: [Chrome, Firefox, Safari]
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
"""
    )
    return path
