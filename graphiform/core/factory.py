"""Schema object factory.

One builder per kind, all going through the namespace registry. Dependencies
between kinds are resolved by plain recursion (Connection -> Edge -> Type,
resolvers -> Filter/Sort); the registry guarantees each object is built once.

The Filter and the base resolver are additionally cached per model because
they get decorated once after registration (Filter gains its self-referencing
`OR` argument, the base resolver gains `where`/`sort`).
"""
from __future__ import annotations

import logging
import threading
from typing import Any, Dict, Optional

from ..config import SchemaConfig
from ..errors import ConfigurationError, ResolutionError
from ..naming import demodulize, derived_name, enum_name, snake_to_camel
from .capabilities import SupportsFilters, SupportsSorts, access_relation, is_present, to_plain
from .nodes import (
    DEFAULT_BASES,
    ConnectionObject,
    EdgeObject,
    EnumObject,
    FilterObject,
    InputObject,
    Kind,
    LifecycleState,
    Resolver,
    SortObject,
    TypeObject,
)
from .registry import NamespaceRegistry

__all__ = ['SchemaContext', 'ModelSchema', 'ModelCache']

_logger = logging.getLogger("graphiform")


class ModelCache:
    """Per-model cache for objects that carry a one-time decoration step."""

    def __init__(self):
        self.lock = threading.RLock()
        self._entries: Dict[str, Any] = {}

    def get(self, key: str) -> Any:
        return self._entries.get(key)

    def set(self, key: str, value: Any) -> None:
        self._entries[key] = value


class SchemaContext:
    """Owns the registry and configuration shared by all model schemas.

    Create one per generated schema (tests use a fresh one per test).
    """

    def __init__(self, config: Optional[SchemaConfig] = None, registry: Optional[NamespaceRegistry] = None):
        self.config = config or SchemaConfig()
        self.registry = registry or NamespaceRegistry()
        self._schemas: Dict[str, 'ModelSchema'] = {}
        self._caches: Dict[str, ModelCache] = {}
        self._guard = threading.Lock()

    def model(self, model: Any) -> 'ModelSchema':
        from ..adapters import as_model

        descriptor = as_model(model)
        identity = descriptor.identity()
        with self._guard:
            schema = self._schemas.get(identity)
            if schema is None:
                schema = ModelSchema(self, descriptor)
                self._schemas[identity] = schema
            return schema

    def model_cache(self, identity: str) -> ModelCache:
        with self._guard:
            cache = self._caches.get(identity)
            if cache is None:
                cache = ModelCache()
                self._caches[identity] = cache
            return cache

    def base(self, kind: Kind) -> type:
        base_cls = self.config.bases.get(kind)
        if base_cls is None:
            raise ConfigurationError(f"No base class configured for kind '{kind.value}'")
        expected = DEFAULT_BASES[kind]
        if not (isinstance(base_cls, type) and issubclass(base_cls, expected)):
            raise ConfigurationError(
                f"Base for kind '{kind.value}' must subclass {expected.__name__}, got {base_cls!r}"
            )
        return base_cls


class ModelSchema:
    """Per-model accessors for every derived schema object."""

    def __init__(self, context: SchemaContext, model: Any):
        self.context = context
        self.model = model
        self.identity = model.identity()
        self.base_name = demodulize(self.identity)

    def __repr__(self):
        return f'<ModelSchema {self.identity}>'

    # ---------- helpers ----------
    def name_for(self, namespace: str) -> str:
        return derived_name(namespace, self.base_name)

    def _get_or_create(self, namespace: str, builder, *, name: Optional[str] = None, decorate=None):
        return self.context.registry.get_or_create(
            namespace,
            name or self.name_for(namespace),
            builder,
            owner=self.identity,
            decorate=decorate,
        )

    def _build(self, kind: Kind, namespace: str, *, name: Optional[str] = None, **kwargs):
        base_cls = self.context.base(kind)
        obj_name = name or self.name_for(namespace)
        _logger.debug("graphiform: building %s %s for %s", kind.value, obj_name, self.identity)
        return base_cls(obj_name, namespace, **kwargs)

    def _description(self) -> Optional[str]:
        describe = getattr(self.model, 'description', None)
        if callable(describe):
            return describe()
        return None

    # ---------- schema objects ----------
    def type(self) -> TypeObject:
        return self._get_or_create('types', lambda: self._build(Kind.TYPE, 'types', description=self._description()))

    def input(self) -> InputObject:
        return self._get_or_create('inputs', lambda: self._build(Kind.INPUT, 'inputs'))

    def filter(self) -> FilterObject:
        cache = self.context.model_cache(self.identity)
        with cache.lock:
            cached = cache.get('filter')
            if cached is not None:
                return cached

            def build():
                return self._build(Kind.FILTER, 'filters')

            def attach_or(shell: FilterObject) -> None:
                # shell is registered but not yet decorated; the lookup returns it as-is
                self_ref = self._get_or_create('filters', build)
                shell.argument('OR', self_ref, many=True, required=False)

            obj = self._get_or_create('filters', build, decorate=attach_or)
            cache.set('filter', obj)
            return obj

    def sort(self) -> SortObject:
        return self._get_or_create('sorts', lambda: self._build(Kind.SORT, 'sorts'))

    def edge(self) -> EdgeObject:
        return self._get_or_create('edges', lambda: self._build(Kind.EDGE, 'edges', node_type=self.type()))

    def connection(self) -> ConnectionObject:
        return self._get_or_create(
            'connections', lambda: self._build(Kind.CONNECTION, 'connections', edge_type=self.edge())
        )

    def enum_resolver(self, attribute: str) -> EnumObject:
        attribute = str(attribute)
        name = enum_name(self.base_name, attribute)

        def build():
            declared_enums = getattr(self.model, 'declared_enums', None)
            declared = (declared_enums() if callable(declared_enums) else None) or {}
            # a mapping of key -> stored value contributes its keys
            values = declared.get(attribute) or ()
            return self._build(Kind.ENUM, 'enums', name=name, values=list(values))

        return self._get_or_create('enums', build, name=name)

    # ---------- resolvers ----------
    def base_resolver(self) -> Resolver:
        cache = self.context.model_cache(self.identity)
        with cache.lock:
            cached = cache.get('base_resolver')
            if cached is not None:
                return cached

            def attach_arguments(resolver: Resolver) -> None:
                filter_obj = self.filter()
                sort_obj = self.sort()
                resolver.argument('where', filter_obj, required=False)
                if sort_obj.arguments:
                    resolver.argument('sort', sort_obj, required=False)

            # default resolve_fn returns the contextual object unchanged
            obj = self._get_or_create(
                'resolvers', lambda: self._build(Kind.RESOLVER, 'resolvers'), decorate=attach_arguments
            )
            cache.set('base_resolver', obj)
            return obj

    def query_resolver(self) -> Resolver:
        def build():
            return self._build(
                Kind.RESOLVER,
                'queries',
                result_type=self.type(),
                null=False,
                parent=self.base_resolver(),
                resolve_fn=self._resolve_query,
            )

        return self._get_or_create('queries', build)

    def connection_query_resolver(self) -> Resolver:
        def build():
            return self._build(
                Kind.RESOLVER,
                'connection_queries',
                result_type=self.connection(),
                null=False,
                parent=self.base_resolver(),
                resolve_fn=self._resolve_connection_query,
            )

        return self._get_or_create('connection_queries', build)

    def create_resolver(self, relation_accessor: str, result_type: Any = None, *, null: bool = False) -> Resolver:
        """Build a new, uncached resolver traversing `relation_accessor` from the resolved object.

        The relation value is filtered with the `where` argument when it supports it.
        """
        base = self.base_resolver()
        base_fn = base.resolve_fn

        def resolve(obj: Any, arguments: Dict[str, Any]) -> Any:
            where = to_plain(arguments.get('where')) or {}
            rest = {k: v for k, v in arguments.items() if k != 'where'}
            value = base_fn(obj, rest)
            value = access_relation(value, relation_accessor)
            if isinstance(value, SupportsFilters):
                return value.apply_filters(where)
            return value

        name = self.base_name + snake_to_camel(str(relation_accessor), upper_first=True) + 'Resolver'
        resolver = self._build(
            Kind.RESOLVER,
            'resolvers',
            name=name,
            result_type=result_type if result_type is not None else self.type(),
            null=null,
            parent=base,
            resolve_fn=resolve,
        )
        # never registered: complete as soon as it is built
        resolver.state = LifecycleState.DECORATED
        return resolver

    # ---------- resolution ----------
    def _default_collection(self, resolver_name: str) -> Any:
        accessor = getattr(self.model, 'default_collection', None)
        if not callable(accessor):
            raise ResolutionError(f"Model {self.identity} has no default collection", resolver=resolver_name)
        return accessor()

    def _resolve_query(self, obj: Any, arguments: Dict[str, Any]) -> Any:
        resolver_name = self.name_for('queries')
        collection = self._default_collection(resolver_name)
        where = arguments.get('where')
        if is_present(where) and isinstance(collection, SupportsFilters):
            collection = collection.apply_filters(to_plain(where))
        first = getattr(collection, 'first', None)
        if callable(first):
            return first()
        try:
            iterator = iter(collection)
        except TypeError:
            raise ResolutionError(
                f"Collection {type(collection).__name__} has no first element", resolver=resolver_name
            )
        return next(iterator, None)

    def _resolve_connection_query(self, obj: Any, arguments: Dict[str, Any]) -> Any:
        collection = self._default_collection(self.name_for('connection_queries'))
        where = arguments.get('where')
        sort = arguments.get('sort')
        if is_present(where) and isinstance(collection, SupportsFilters):
            collection = collection.apply_filters(to_plain(where))
        if is_present(sort) and isinstance(collection, SupportsSorts):
            collection = collection.apply_sorts(to_plain(sort))
        return collection
