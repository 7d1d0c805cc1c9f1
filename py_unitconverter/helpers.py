"""Dot-notation access to nested mappings.

Pure functions over an explicit mapping argument, used to read configuration tables:

    >>> config = {'pyuc': {'calculator': 'decimal', 'rounding': {'mode': 'half_up'}}}
    >>> dot_get(config, 'pyuc.rounding.mode')
    'half_up'
    >>> dot_get(config, 'pyuc.precision', 2)
    2
    >>> dot_has(config, 'pyuc.calculator')
    True
"""
from typing import Any, Mapping

__all__ = ('dot_get', 'dot_has')

_MISSING = object()


def _walk(mapping: Mapping[str, Any], path: str) -> Any:
    if not isinstance(path, str):
        raise TypeError(f"Dot path must be a str, got {type(path).__name__}")
    node: Any = mapping
    for part in path.split('.') if path else ():
        if not isinstance(node, Mapping) or part not in node:
            return _MISSING
        node = node[part]
    return node


def dot_get(mapping: Mapping[str, Any], path: str, default: Any = None) -> Any:
    """Value at `path` ('a.b.c') inside nested mappings, or `default` when any key is missing.

    An empty path returns the mapping itself.
    """
    value = _walk(mapping, path)
    return default if value is _MISSING else value


def dot_has(mapping: Mapping[str, Any], path: str) -> bool:
    """True when every key of `path` exists."""
    return _walk(mapping, path) is not _MISSING
