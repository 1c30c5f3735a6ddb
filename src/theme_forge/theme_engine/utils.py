"""Utility functions for theme engine operations.

Dictionary merging, dotted-path access and name formatting helpers shared by
composition, the resolver, the registry and the generators.
"""

import copy
import re
from typing import Any, Dict, List, Tuple


_CAMEL_BOUNDARY = re.compile(r'([a-z0-9])([A-Z])')


def deep_merge_dict(base: Dict[Any, Any], overlay: Dict[Any, Any],
                    array_strategy: str = "replace") -> Dict[Any, Any]:
    """Deep merge two dictionaries, with overlay taking precedence.

    Args:
        base: Base dictionary
        overlay: Overlay dictionary (takes precedence)
        array_strategy: 'replace' swaps lists wholesale, 'concat' appends
            overlay items to the base list

    Returns:
        New merged dictionary; neither input is modified
    """
    result = copy.deepcopy(base)

    for key, value in overlay.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge_dict(result[key], value, array_strategy)
        elif (array_strategy == "concat" and key in result
              and isinstance(result[key], list) and isinstance(value, list)):
            result[key] = result[key] + copy.deepcopy(value)
        else:
            result[key] = copy.deepcopy(value)

    return result


def fill_missing(base: Dict[Any, Any], fallback: Dict[Any, Any]) -> Dict[Any, Any]:
    """Deep merge where values already in ``base`` win over ``fallback``."""
    return deep_merge_dict(fallback, base)


def _step(node: Any, segment: str) -> Tuple[bool, Any]:
    if isinstance(node, dict):
        if segment in node:
            return True, node[segment]
        if segment.lstrip('-').isdigit() and int(segment) in node:
            return True, node[int(segment)]
        return False, None
    if isinstance(node, list) and segment.isdigit():
        index = int(segment)
        if index < len(node):
            return True, node[index]
    return False, None


def get_path(data: Dict[str, Any], path: str) -> Tuple[bool, Any]:
    """Look up a dotted path.

    Returns:
        Tuple of (found, value)
    """
    node: Any = data
    for segment in path.split('.'):
        found, node = _step(node, segment)
        if not found:
            return False, None
    return True, node


def set_path(data: Dict[str, Any], path: str, value: Any) -> Dict[str, Any]:
    """Return a copy of ``data`` with ``value`` stored at a dotted path."""
    result = copy.deepcopy(data)
    segments = path.split('.')
    node = result
    for segment in segments[:-1]:
        child = node.get(segment)
        if not isinstance(child, dict):
            child = {}
            node[segment] = child
        node = child
    node[segments[-1]] = value
    return result


def expand_dotted_keys(flat: Dict[str, Any]) -> Dict[str, Any]:
    """Turn ``{"colors.primary": x}`` into ``{"colors": {"primary": x}}``."""
    nested: Dict[str, Any] = {}
    for key, value in flat.items():
        nested = deep_merge_dict(nested, set_path({}, key, value))
    return nested


def count_leaves(data: Any) -> int:
    """Number of scalar leaves in a nested structure."""
    if isinstance(data, dict):
        return sum(count_leaves(v) for v in data.values())
    if isinstance(data, list):
        return sum(count_leaves(v) for v in data)
    return 1


def iter_leaves(data: Any, prefix: str = "") -> List[Tuple[str, Any]]:
    """Flatten a nested structure into (dotted path, leaf value) pairs."""
    if isinstance(data, dict):
        items: List[Tuple[str, Any]] = []
        for key, value in data.items():
            child = f"{prefix}.{key}" if prefix else str(key)
            items.extend(iter_leaves(value, child))
        return items
    if isinstance(data, list):
        items = []
        for index, value in enumerate(data):
            items.extend(iter_leaves(value, f"{prefix}.{index}"))
        return items
    return [(prefix, data)]


def camel_to_kebab(name: str) -> str:
    """primaryHover -> primary-hover"""
    return _CAMEL_BOUNDARY.sub(r'\1-\2', name).lower()


def kebab_to_camel(name: str) -> str:
    """primary-hover -> primaryHover"""
    head, *tail = name.split('-')
    return head + ''.join(part[:1].upper() + part[1:] for part in tail)


def camel_to_snake(name: str) -> str:
    return _CAMEL_BOUNDARY.sub(r'\1_\2', name).lower().replace('-', '_')


def to_identifier(name: str) -> str:
    """Make a key usable as a bare identifier in generated JS/TS/Dart."""
    cleaned = re.sub(r'[^0-9A-Za-z_]', '_', name)
    if cleaned[:1].isdigit():
        cleaned = f"_{cleaned}"
    return cleaned


def slugify(name: str) -> str:
    return "-".join(re.sub(r'[^0-9a-zA-Z\s-]', '', name).lower().split()) or "theme"
