"""Naming utilities for graphiform.

Every schema object name is derived from a model's identity: the identity is
stripped of its module/namespace hierarchy to get the base name, and each
namespace applies a fixed suffix to it. Enum mirrors append the pluralized,
capitalized attribute name.
"""
from __future__ import annotations

import re
from typing import Any, Dict

import inflection

__all__ = [
    'NAMESPACE_SUFFIXES',
    'camel_to_snake',
    'snake_to_camel',
    'demodulize',
    'base_name',
    'derived_name',
    'enum_name',
]

# namespace -> suffix appended to the model base name
NAMESPACE_SUFFIXES: Dict[str, str] = {
    'types': '',
    'inputs': 'Input',
    'filters': 'Filter',
    'sorts': 'Sort',
    'edges': 'Edge',
    'connections': 'Connection',
    'resolvers': 'Resolver',
    'queries': 'Query',
    'connection_queries': 'ConnectionQuery',
}

_hierarchy_pattern = re.compile(r'::|\.')


def camel_to_snake(name: str) -> str:
    """Convert camelCase or PascalCase identifier to snake_case.

    Idempotent for already snake_case input. Handles sequences of capitals.
    """
    if not isinstance(name, str) or not name:
        return name  # type: ignore
    s1 = re.sub(r"(.)([A-Z][a-z]+)", r"\1_\2", name)
    s2 = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", s1)
    return s2.lower()


def snake_to_camel(name: str, upper_first: bool = False) -> str:
    """Convert snake_case identifier to camelCase or PascalCase.

    upper_first=False returns lowerCamelCase (default), True returns UpperCamelCase.
    Idempotent for already camelCase strings without underscores.
    """
    if not isinstance(name, str) or not name:
        return name  # type: ignore
    if '_' not in name:
        if upper_first:
            return name[0].upper() + name[1:]
        return name
    parts = [p for p in name.split('_') if p]
    if not parts:
        return ''
    first = parts[0].lower() if not upper_first else parts[0].capitalize()
    rest = ''.join(p.capitalize() for p in parts[1:])
    return first + rest


def demodulize(identity: str) -> str:
    """Strip module/namespace hierarchy: 'blog.models.Post' and 'Blog::Post' -> 'Post'."""
    return _hierarchy_pattern.split(str(identity))[-1]


def base_name(model: Any) -> str:
    return demodulize(model.identity())


def derived_name(namespace: str, base: str) -> str:
    return base + NAMESPACE_SUFFIXES[namespace]


def enum_name(base: str, attribute: str) -> str:
    """Name of the enum mirror for `attribute`: ('Post', 'status') -> 'PostStatuses'.

    Only the first letter of the pluralized attribute is uppercased, the rest is
    lowercased: ('User', 'access_level') -> 'UserAccess_levels'.
    """
    plural = inflection.pluralize(str(attribute))
    return base + plural[:1].upper() + plural[1:].lower()
