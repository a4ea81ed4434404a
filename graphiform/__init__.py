"""graphiform public API and lightweight lazy exports.

Derives a GraphQL schema graph (types, inputs, filters, sorts, edges,
connections, resolvers, enums) from data models, building every object once
per name.

Exposes:
- SchemaContext, ModelSchema, SchemaConfig, NamespaceRegistry
- Error classes from graphiform.errors
- Lazy attributes: StrawberryExporter, to_strawberry, SQLAlchemyModel,
  declare_field, declare_association, SortDirection
"""
from __future__ import annotations

from .config import SchemaConfig
from .core.factory import ModelSchema, SchemaContext
from .core.nodes import Kind
from .core.registry import NamespaceRegistry
from .errors import (
    ConfigurationError,
    ConstructionError,
    GraphiformError,
    NamingCollisionError,
    ResolutionError,
)


def __getattr__(name: str):  # PEP 562 lazy exports
    import importlib as _importlib
    if name in {'StrawberryExporter', 'to_strawberry'}:
        return getattr(_importlib.import_module(__name__ + '.export'), name)
    if name in {'declare_field', 'declare_association', 'SortDirection'}:
        return getattr(_importlib.import_module(__name__ + '.fields'), name)
    if name in {'SQLAlchemyModel', 'SelectCollection'}:
        return getattr(_importlib.import_module(__name__ + '.adapters.sqla'), name)
    raise AttributeError(name)


__all__ = [
    'SchemaConfig', 'SchemaContext', 'ModelSchema', 'NamespaceRegistry', 'Kind',
    'GraphiformError', 'ConfigurationError', 'ConstructionError', 'NamingCollisionError', 'ResolutionError',
    'StrawberryExporter', 'to_strawberry',
    'declare_field', 'declare_association', 'SortDirection',
    'SQLAlchemyModel', 'SelectCollection',
]
