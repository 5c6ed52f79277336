"""Export a CombinationTable for test runners and reports.

Example:
    >>> import pytest
    >>> from pywise.export import as_parametrize
    >>>
    >>> argnames, argvalues, ids = as_parametrize(table)
    >>>
    >>> @pytest.mark.parametrize(argnames, argvalues, ids=ids)
    ... def test_login(browser, os):
    ...     ...
"""

from __future__ import annotations

import csv
import io
import json
import re
from typing import Any

from pywise.core.combination import CombinationTable
from pywise.errors import InvalidInputError


def _argname(name: str) -> str:
    """Turn a parameter name into a valid Python identifier."""
    cleaned = re.sub(r"\W+", "_", name.strip()).strip("_").lower()
    if not cleaned or cleaned[0].isdigit():
        cleaned = f"p_{cleaned}"
    return cleaned


def as_parametrize(table: CombinationTable) -> tuple[list[str], list[tuple[Any, ...]], list[str]]:
    """Arguments for ``pytest.mark.parametrize``.

    Returns:
        ``(argnames, argvalues, ids)`` where argnames are identifier-safe
        parameter names, argvalues one tuple of produced values per
        combination, and ids the combination keys.

    Raises:
        InvalidInputError: If two parameter names map to the same argname.
    """
    if len(table) == 0:
        return [], [], []
    first = table[0]
    argnames = [_argname(p.name) for p in first.parameters]
    seen: dict[str, str] = {}
    for parameter, argname in zip(first.parameters, argnames):
        if argname in seen:
            raise InvalidInputError(
                f"Parameters '{seen[argname]}' and '{parameter.name}' both map to "
                f"argument name '{argname}'",
                argname=argname,
                suggestions=["Rename one of the parameters so the names differ after normalization"],
            )
        seen[argname] = parameter.name
    argvalues: list[tuple[Any, ...]] = []
    ids: list[str] = []
    for combination in table:
        row = combination.as_data_provider_row()
        argvalues.append(tuple(row[1:]))
        ids.append(combination.key)
    return argnames, argvalues, ids


def to_records(table: CombinationTable) -> list[dict[str, Any]]:
    """Rows of partition names, one dict per combination."""
    return [combination.to_dict() for combination in table]


def to_json(table: CombinationTable, indent: int | None = 2) -> str:
    """Render partition names as a JSON array of objects."""
    return json.dumps(to_records(table), indent=indent, default=str)


def to_csv(table: CombinationTable) -> str:
    """Render partition names as CSV with a header row."""
    buffer = io.StringIO()
    if len(table) == 0:
        return ""
    names = [p.name for p in table[0].parameters]
    writer = csv.DictWriter(buffer, fieldnames=names, lineterminator="\n")
    writer.writeheader()
    for record in to_records(table):
        writer.writerow(record)
    return buffer.getvalue()
