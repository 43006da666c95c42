"""Recursive traversal of JSON-like trees."""

from __future__ import annotations

from typing import Union

from .errors import MalformedInputError
from .table import StringTable

JsonValue = Union[None, bool, int, float, str, list["JsonValue"], dict[str, "JsonValue"]]

_SCALARS = (bool, int, float)


def collect(tree: JsonValue, sink: StringTable) -> None:
    """
    Add every string leaf of `tree` to `sink`.

    Dictionary values and list items are walked the same way; dictionary
    keys are never collected. Numbers, booleans and None are skipped.

    Raises:
        MalformedInputError: If the tree contains a cycle or a non-JSON value
    """
    _collect(tree, sink, set(), "$")


def _collect(value, sink: StringTable, ancestors: set[int], path: str) -> None:
    if isinstance(value, str):
        sink.add(value)
    elif isinstance(value, dict):
        _enter(value, ancestors, path)
        for key, child in value.items():
            _collect(child, sink, ancestors, f"{path}.{key}")
        ancestors.discard(id(value))
    elif isinstance(value, (list, tuple)):
        _enter(value, ancestors, path)
        for index, child in enumerate(value):
            _collect(child, sink, ancestors, f"{path}[{index}]")
        ancestors.discard(id(value))
    elif value is None or isinstance(value, _SCALARS):
        return
    else:
        raise MalformedInputError(
            f"Unsupported value of type {type(value).__name__} at {path}"
        )


def _enter(container, ancestors: set[int], path: str) -> None:
    if id(container) in ancestors:
        raise MalformedInputError(f"Cycle detected at {path}")
    ancestors.add(id(container))


def rebuild(tree: JsonValue, table: StringTable) -> JsonValue:
    """
    Return a copy of `tree` with every string leaf looked up in `table`.

    Strings missing from the table, or translated to an empty string, are
    kept as they are. The input is never modified: every dict and list in
    the result is a new object.
    """
    if isinstance(tree, str):
        return table.get(tree) or tree
    elif isinstance(tree, dict):
        return {key: rebuild(value, table) for key, value in tree.items()}
    elif isinstance(tree, (list, tuple)):
        return [rebuild(item, table) for item in tree]
    else:
        # None, numbers and booleans
        return tree
