"""Optional collaborator capabilities and argument normalization.

Collections may or may not know how to filter/sort themselves; resolvers check
for the capability explicitly before using it.
"""
from __future__ import annotations

from dataclasses import fields as _dc_fields, is_dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Protocol, runtime_checkable

from strawberry import UNSET

__all__ = [
    'SupportsFilters',
    'SupportsSorts',
    'is_present',
    'to_plain',
    'access_relation',
]

_ABSENT = object()


@runtime_checkable
class SupportsFilters(Protocol):
    def apply_filters(self, criteria: Dict[str, Any]) -> Any: ...


@runtime_checkable
class SupportsSorts(Protocol):
    def apply_sorts(self, criteria: Dict[str, Any]) -> Any: ...


def is_present(value: Any) -> bool:
    """True unless the argument was omitted (None or Strawberry UNSET)."""
    return value is not None and value is not UNSET


def to_plain(obj: Any) -> Any:
    """Convert a Strawberry input instance (or nested list/dict) to plain Python dicts/lists.

    UNSET fields are dropped, enums collapse to their value.
    """
    if obj is None or obj is UNSET:
        return None
    if isinstance(obj, (str, int, float, bool)):
        return obj
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, (list, tuple)):
        return [to_plain(x) for x in obj]
    if isinstance(obj, Mapping):
        return {k: to_plain(v) for k, v in obj.items() if v is not UNSET}
    if is_dataclass(obj) and not isinstance(obj, type):
        out: Dict[str, Any] = {}
        for f in _dc_fields(obj):
            v = getattr(obj, f.name, UNSET)
            if v is UNSET:
                continue
            # keyed by the GraphQL name when one is set (`in_` -> `in`)
            out[getattr(f, 'graphql_name', None) or f.name] = to_plain(v)
        return out
    d = getattr(obj, '__dict__', None)
    if isinstance(d, dict):
        return {k: to_plain(v) for k, v in d.items() if not k.startswith('_') and v is not UNSET}
    return obj


def access_relation(value: Any, accessor: str) -> Any:
    """Return `value.<accessor>` (or `value[accessor]` for mappings); `value` itself when absent."""
    if isinstance(value, Mapping):
        return value.get(accessor, value)
    sub = getattr(value, accessor, _ABSENT)
    if sub is _ABSENT:
        return value
    return sub() if callable(sub) else sub
