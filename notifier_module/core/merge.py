"""
Deep merge and copy helpers for option records and payloads
"""

import copy
from typing import Any, Dict, Mapping, MutableMapping


def deep_copy(value: Any) -> Any:
    """Return an independent copy of a mapping/list tree."""
    return copy.deepcopy(value)


def deep_merge(target: MutableMapping, source: Mapping) -> MutableMapping:
    """
    Merge ``source`` into ``target`` in place.

    Mappings merge key-wise and recursively. Every other value,
    including lists, overwrites the target value with a copy.

    Args:
        target: Mapping to update
        source: Mapping whose values win

    Returns:
        ``target``
    """
    for key, value in source.items():
        current = target.get(key)
        if isinstance(value, Mapping) and isinstance(current, MutableMapping):
            deep_merge(current, value)
        elif isinstance(value, Mapping):
            target[key] = deep_merge({}, value)
        else:
            target[key] = deep_copy(value)
    return target


def merged(base: Mapping, *overrides: Mapping) -> Dict[str, Any]:
    """Return a new dict: a copy of ``base`` with ``overrides`` merged in order."""
    result = deep_merge({}, base)
    for override in overrides:
        deep_merge(result, override)
    return result
