from .nodes import (
    DEFAULT_BASES,
    Argument,
    ConnectionObject,
    EdgeObject,
    EnumObject,
    Field,
    FilterObject,
    InputObject,
    Kind,
    LifecycleState,
    Resolver,
    SchemaObject,
    SortObject,
    TypeObject,
)
from .registry import Namespace, NamespaceRegistry
from .factory import ModelCache, ModelSchema, SchemaContext

__all__ = [
    'DEFAULT_BASES',
    'Argument',
    'ConnectionObject',
    'EdgeObject',
    'EnumObject',
    'Field',
    'FilterObject',
    'InputObject',
    'Kind',
    'LifecycleState',
    'Resolver',
    'SchemaObject',
    'SortObject',
    'TypeObject',
    'Namespace',
    'NamespaceRegistry',
    'ModelCache',
    'ModelSchema',
    'SchemaContext',
]
