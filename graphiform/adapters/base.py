from __future__ import annotations

from typing import Any, Iterable, Mapping, Protocol, Union, runtime_checkable

__all__ = ['ModelDescriptor', 'BaseModelAdapter', 'DeclaredEnums']

# attribute -> value keys, either listed or mapped to their stored values
DeclaredEnums = Mapping[str, Union[Iterable[str], Mapping[str, Any]]]


@runtime_checkable
class ModelDescriptor(Protocol):
    """What the factory consumes from a data model.

    `default_collection()` is optional: without it, query resolvers fail at
    resolution time, never at build time. `declared_enums()` maps each
    enumerated attribute to its keys: a list such as `["draft", "published"]`
    or a mapping to stored values such as `{"draft": 0, "published": 1}`.
    """

    def identity(self) -> str: ...

    def declared_enums(self) -> DeclaredEnums: ...


class BaseModelAdapter:
    name = 'base'

    def identity(self) -> str:
        raise NotImplementedError

    def declared_enums(self) -> DeclaredEnums:
        return {}

    def description(self) -> Any:
        return None
