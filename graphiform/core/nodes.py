"""Schema object kinds.

These are the base kinds the factory specializes. A SchemaObject is a plain
in-memory node (kind, namespace, name, body); the export layer turns the
graph into Strawberry classes.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Tuple

from ..errors import ConfigurationError, ResolutionError

__all__ = [
    'Kind',
    'LifecycleState',
    'Field',
    'Argument',
    'SchemaObject',
    'TypeObject',
    'InputObject',
    'FilterObject',
    'SortObject',
    'EdgeObject',
    'ConnectionObject',
    'EnumObject',
    'Resolver',
    'ResolveFn',
    'DEFAULT_BASES',
]

ResolveFn = Callable[[Any, Dict[str, Any]], Any]


class Kind(Enum):
    TYPE = 'type'
    INPUT = 'input'
    FILTER = 'filter'
    SORT = 'sort'
    EDGE = 'edge'
    CONNECTION = 'connection'
    RESOLVER = 'resolver'
    ENUM = 'enum'


class LifecycleState(Enum):
    BUILDING = 'building'
    REGISTERED = 'registered'
    DECORATED = 'decorated'


@dataclass
class Field:
    """Output field. `type` is a SchemaObject, a Python type or a Strawberry type."""
    name: str
    type: Any
    null: bool = True
    many: bool = False
    description: Optional[str] = None
    resolver: Optional['Resolver'] = None


@dataclass
class Argument:
    name: str
    type: Any
    required: bool = False
    many: bool = False
    description: Optional[str] = None


class SchemaObject:
    kind: Kind

    def __init__(self, name: str, namespace: str, *, description: Optional[str] = None):
        self.name = name
        self.namespace = namespace
        self.description = description
        self.state = LifecycleState.BUILDING

    def __repr__(self):
        return '<{} {}:{} ({})>'.format(type(self).__name__, self.namespace, self.name, self.state.value)


class TypeObject(SchemaObject):
    kind = Kind.TYPE

    def __init__(self, name: str, namespace: str, *, description: Optional[str] = None):
        super().__init__(name, namespace, description=description)
        self.fields: Dict[str, Field] = {}

    def field(self, name: str, type_: Any, *, null: bool = True, many: bool = False,
              description: Optional[str] = None, resolver: Optional['Resolver'] = None) -> Field:
        if name in self.fields:
            raise ConfigurationError(f"Field '{name}' already declared on {self.name}")
        fdef = Field(name, type_, null=null, many=many, description=description, resolver=resolver)
        self.fields[name] = fdef
        return fdef


class InputObject(SchemaObject):
    kind = Kind.INPUT

    def __init__(self, name: str, namespace: str, *, description: Optional[str] = None):
        super().__init__(name, namespace, description=description)
        self.arguments: Dict[str, Argument] = {}

    @property
    def fields(self) -> Dict[str, Argument]:
        return self.arguments

    def argument(self, name: str, type_: Any, *, required: bool = False, many: bool = False,
                 description: Optional[str] = None) -> Argument:
        if name in self.arguments:
            raise ConfigurationError(f"Argument '{name}' already declared on {self.name}")
        adef = Argument(name, type_, required=required, many=many, description=description)
        self.arguments[name] = adef
        return adef

    def get_argument(self, name: str) -> Optional[Argument]:
        return self.arguments.get(name)


class FilterObject(InputObject):
    kind = Kind.FILTER


class SortObject(InputObject):
    kind = Kind.SORT


class EdgeObject(TypeObject):
    kind = Kind.EDGE

    def __init__(self, name: str, namespace: str, *, node_type: TypeObject, description: Optional[str] = None):
        super().__init__(name, namespace, description=description)
        self.node_type = node_type


class ConnectionObject(TypeObject):
    kind = Kind.CONNECTION

    def __init__(self, name: str, namespace: str, *, edge_type: EdgeObject, description: Optional[str] = None):
        super().__init__(name, namespace, description=description)
        self.edge_type = edge_type

    @property
    def node_type(self) -> TypeObject:
        return self.edge_type.node_type


class EnumObject(SchemaObject):
    kind = Kind.ENUM

    def __init__(self, name: str, namespace: str, *, values: Iterable[str] = (), description: Optional[str] = None):
        super().__init__(name, namespace, description=description)
        self.values: Tuple[str, ...] = tuple(str(v) for v in values)


def _return_object(obj: Any, arguments: Dict[str, Any]) -> Any:
    return obj


class Resolver(SchemaObject):
    """Executable resolution unit: result type, declared arguments and a resolve function.

    Arguments declared on a parent resolver are inherited; the parent is expected
    to be fully decorated before children are built from it.
    """
    kind = Kind.RESOLVER

    def __init__(
        self,
        name: str,
        namespace: str,
        *,
        result_type: Any = None,
        null: bool = True,
        resolve_fn: Optional[ResolveFn] = None,
        parent: Optional['Resolver'] = None,
        description: Optional[str] = None,
    ):
        super().__init__(name, namespace, description=description)
        self.result_type = result_type
        self.null = null
        self.resolve_fn: ResolveFn = resolve_fn or _return_object
        self.parent = parent
        self._arguments: Dict[str, Argument] = {}

    @property
    def arguments(self) -> Dict[str, Argument]:
        if self.parent is None:
            return dict(self._arguments)
        merged = self.parent.arguments
        merged.update(self._arguments)
        return merged

    def argument(self, name: str, type_: Any, *, required: bool = False, many: bool = False,
                 description: Optional[str] = None) -> Argument:
        if name in self._arguments:
            raise ConfigurationError(f"Argument '{name}' already declared on {self.name}")
        adef = Argument(name, type_, required=required, many=many, description=description)
        self._arguments[name] = adef
        return adef

    def get_argument(self, name: str) -> Optional[Argument]:
        return self.arguments.get(name)

    def resolve(self, obj: Any = None, **arguments: Any) -> Any:
        declared = self.arguments
        unknown = sorted(set(arguments) - set(declared))
        if unknown:
            raise ResolutionError(f"Unknown argument(s): {', '.join(unknown)}", resolver=self.name)
        missing = [a.name for a in declared.values() if a.required and arguments.get(a.name) is None]
        if missing:
            raise ResolutionError(f"Missing required argument(s): {', '.join(missing)}", resolver=self.name)
        return self.resolve_fn(obj, arguments)


# kind -> default base class the factory instantiates
DEFAULT_BASES: Mapping[Kind, type] = {
    Kind.TYPE: TypeObject,
    Kind.INPUT: InputObject,
    Kind.FILTER: FilterObject,
    Kind.SORT: SortObject,
    Kind.EDGE: EdgeObject,
    Kind.CONNECTION: ConnectionObject,
    Kind.RESOLVER: Resolver,
    Kind.ENUM: EnumObject,
}
