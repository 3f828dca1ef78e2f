"""Helpers for reading and writing nested ORTB2 dictionaries."""

import copy
from typing import Any


def deep_get(obj: Any, path: str, default: Any = None) -> Any:
    """
    Read a dotted path from nested dictionaries.

    Returns ``default`` when any segment is missing or not a dict.
    """
    current = obj
    for key in path.split("."):
        if not isinstance(current, dict) or key not in current:
            return default
        current = current[key]
    return current


def deep_set(obj: dict[str, Any], path: str, value: Any) -> None:
    """
    Set a dotted path on nested dictionaries.

    Intermediate dictionaries are created as needed. Sibling keys are
    never replaced. A non-dict intermediate raises ``TypeError``.
    """
    keys = path.split(".")
    current = obj
    for key in keys[:-1]:
        if key not in current or current[key] is None:
            current[key] = {}
        current = current[key]
        if not isinstance(current, dict):
            raise TypeError(f"Cannot set '{path}': '{key}' is not an object")
    current[keys[-1]] = value


def merge_deep(*sources: dict[str, Any]) -> dict[str, Any]:
    """
    Deep merge plain dictionaries, later sources winning.

    Nested dicts merge recursively. Lists and scalars replace.
    Inputs are not modified.
    """
    result: dict[str, Any] = {}
    for source in sources:
        if not isinstance(source, dict):
            continue
        for key, value in source.items():
            if isinstance(value, dict) and isinstance(result.get(key), dict):
                result[key] = merge_deep(result[key], value)
            else:
                result[key] = copy.deepcopy(value)
    return result
