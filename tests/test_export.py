"""Tests for table export helpers."""

from __future__ import annotations

import json

import pytest

from pywise import (
    CombinationTable,
    CyclingPartition,
    InvalidInputError,
    ParameterSet,
    SimpleValue,
    TestParameter,
)
from pywise.export import _argname, as_parametrize, to_csv, to_json, to_records
from pywise.generator import generate_combinatorial


@pytest.fixture
def table(browser_os):
    return generate_combinatorial(browser_os)


class TestArgname:
    @pytest.mark.parametrize(
        "name, expected",
        [
            ("Browser", "browser"),
            ("Screen Size", "screen_size"),
            ("2fa", "p_2fa"),
            ("--", "p_"),
        ],
    )
    def test_argname(self, name, expected):
        assert _argname(name) == expected


class TestAsParametrize:
    """Tests for pytest parametrize export."""

    def test_shape(self, table):
        argnames, argvalues, ids = as_parametrize(table)
        assert argnames == ["browser", "os"]
        assert len(argvalues) == len(ids) == 7
        assert ("Safari", "macOS") in argvalues
        assert "Safari|macOS" in ids

    def test_empty_table(self):
        assert as_parametrize(CombinationTable()) == ([], [], [])

    def test_cycling_values_produced(self):
        version = CyclingPartition("Chrome", "116.0", ["116.1"])
        ps = ParameterSet([TestParameter("Browser", [version])])
        table = generate_combinatorial(ps)
        assert as_parametrize(table)[1] == [("116.0",)]
        assert as_parametrize(table)[1] == [("116.1",)]

    def test_colliding_argnames_raise(self):
        ps = ParameterSet(
            [
                TestParameter("OS", [SimpleValue("Windows")]),
                TestParameter("os", [SimpleValue("Linux")]),
            ]
        )
        table = generate_combinatorial(ps)
        with pytest.raises(InvalidInputError, match="'OS' and 'os' both map to argument name 'os'"):
            as_parametrize(table)

    def test_punctuation_collision_raises(self):
        ps = ParameterSet(
            [
                TestParameter("Screen Size", [SimpleValue("small")]),
                TestParameter("screen-size", [SimpleValue("large")]),
            ]
        )
        with pytest.raises(InvalidInputError, match="screen_size"):
            as_parametrize(generate_combinatorial(ps))


class TestRecords:
    """Tests for JSON and CSV rendering."""

    def test_records(self, table):
        records = to_records(table)
        assert {"Browser": "Safari", "OS": "macOS"} in records
        assert len(records) == 7

    def test_json(self, table):
        assert json.loads(to_json(table)) == to_records(table)

    def test_csv(self, table):
        lines = to_csv(table).splitlines()
        assert lines[0] == "Browser,OS"
        assert "Safari,macOS" in lines
        assert len(lines) == 8

    def test_csv_empty(self):
        assert to_csv(CombinationTable()) == ""

    def test_partition_names_not_values(self):
        small = SimpleValue("1024x768", name="small")
        ps = ParameterSet([TestParameter("Resolution", [small])])
        assert to_records(generate_combinatorial(ps)) == [{"Resolution": "small"}]
