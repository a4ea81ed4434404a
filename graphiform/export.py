"""Materialize a graphiform object graph as a Strawberry schema.

Every schema object maps to exactly one Strawberry class. Classes are created
as plain placeholders and cached before their fields are computed, so
self-references (the Filter `OR` argument) and cycles between types resolve to
the same class object that is decorated afterwards.
"""
import base64
import logging
from enum import Enum
from typing import Annotated, Any, Dict, List, Mapping, Optional

import strawberry
from strawberry.types import Info as StrawberryInfo

from .core.capabilities import is_present
from .core.nodes import (
    ConnectionObject,
    EdgeObject,
    EnumObject,
    Field,
    InputObject,
    Resolver,
    SchemaObject,
    TypeObject,
)
from .errors import ConfigurationError
from .naming import camel_to_snake

__all__ = ['StrawberryExporter', 'to_strawberry', 'encode_cursor']

_logger = logging.getLogger("graphiform")


def encode_cursor(index: int) -> str:
    """Opaque cursor for the 0-based position `index` (base64 of the 1-based offset)."""
    return base64.b64encode(str(index + 1).encode('ascii')).decode('ascii')


def _rows(root: Any) -> List[Any]:
    if root is None:
        return []
    return list(root)


def _enum_member(enum_cls: Any, raw: Any) -> Any:
    """Map a raw model value (Enum member, key or stored value) to a member of `enum_cls`."""
    if raw is None or isinstance(raw, enum_cls):
        return raw
    key = raw.name if isinstance(raw, Enum) else raw
    try:
        return enum_cls[key]
    except KeyError:
        return enum_cls(getattr(raw, 'value', raw))


class StrawberryExporter:

    def __init__(self, context: Any = None, strawberry_config: Any = None):
        self.context = context
        if strawberry_config is None and context is not None:
            strawberry_config = context.config.strawberry_config
        self.strawberry_config = strawberry_config
        self._st_types: Dict[str, Any] = {}
        self._st_enums: Dict[Any, Any] = {}

    # ---------- annotations ----------
    def _enum_for(self, type_: Any) -> Optional[Any]:
        if isinstance(type_, EnumObject):
            return self.strawberry_type(type_)
        if isinstance(type_, type) and issubclass(type_, Enum):
            st_enum = self._st_enums.get(type_)
            if st_enum is None:
                # decorate a copy: the model's own enum class stays untouched
                mirror = Enum(type_.__name__, [(m.name, m.value) for m in type_])
                st_enum = strawberry.enum(mirror, name=type_.__name__)
                self._st_enums[type_] = st_enum
            return st_enum
        return None

    def _annotation(self, type_: Any, *, many: bool = False, null: bool = True) -> Any:
        enum_cls = self._enum_for(type_)
        if enum_cls is not None:
            ann = enum_cls
        elif isinstance(type_, SchemaObject):
            ann = self.strawberry_type(type_)
        else:
            ann = type_
        if many:
            ann = List[ann]  # type: ignore[valid-type]
        return Optional[ann] if null else ann

    # ---------- schema objects ----------
    def strawberry_type(self, obj: SchemaObject) -> Any:
        key = f"{obj.namespace}:{obj.name}"
        cached = self._st_types.get(key)
        if cached is not None:
            return cached
        if isinstance(obj, EnumObject):
            return self._enum(obj, key)
        if isinstance(obj, ConnectionObject):
            return self._connection(obj, key)
        if isinstance(obj, EdgeObject):
            return self._edge(obj, key)
        if isinstance(obj, TypeObject):
            return self._object(obj, key)
        if isinstance(obj, InputObject):
            return self._input(obj, key)
        raise ConfigurationError(f"Cannot export {obj!r} as a Strawberry type")

    def _placeholder(self, obj: SchemaObject, key: str) -> Any:
        plain = type(obj.name, (), {'__doc__': obj.description})
        plain.__module__ = __name__
        # cache before computing fields so recursive references find it
        self._st_types[key] = plain
        return plain

    def _enum(self, obj: EnumObject, key: str) -> Any:
        if not obj.values:
            raise ConfigurationError(f"Enum {obj.name} declares no values")
        mirror = Enum(obj.name, [(value, value) for value in obj.values])
        st_enum = strawberry.enum(mirror, name=obj.name, description=obj.description)
        self._st_types[key] = st_enum
        return st_enum

    def _enum_field(self, fdef: Field, enum_cls: Any) -> Any:
        name = fdef.name
        many = fdef.many

        def resolve_value(root):
            raw = getattr(root, name, None)
            if many:
                return [_enum_member(enum_cls, item) for item in raw or []]
            return _enum_member(enum_cls, raw)

        resolve_value.__annotations__ = {'return': self._annotation(fdef.type, many=many, null=fdef.null)}
        return strawberry.field(resolver=resolve_value, description=fdef.description)

    def _object_fields(self, plain: Any, obj: TypeObject, annotations: Dict[str, Any]) -> None:
        for fdef in obj.fields.values():
            if fdef.resolver is not None:
                setattr(plain, fdef.name, self.resolver_field(fdef.resolver, description=fdef.description))
                continue
            enum_cls = self._enum_for(fdef.type)
            if enum_cls is not None:
                setattr(plain, fdef.name, self._enum_field(fdef, enum_cls))
                continue
            annotations[fdef.name] = self._annotation(fdef.type, many=fdef.many, null=fdef.null)
            if fdef.description:
                setattr(plain, fdef.name, strawberry.field(description=fdef.description))

    def _object(self, obj: TypeObject, key: str) -> Any:
        if not obj.fields:
            raise ConfigurationError(f"Type {obj.name} declares no fields")
        plain = self._placeholder(obj, key)
        annotations: Dict[str, Any] = {}
        self._object_fields(plain, obj, annotations)
        setattr(plain, '__annotations__', annotations)
        st_type = strawberry.type(plain, name=obj.name, description=obj.description)
        self._st_types[key] = st_type
        _logger.debug("graphiform: exported type %s", obj.name)
        return st_type

    def _edge(self, obj: EdgeObject, key: str) -> Any:
        plain = self._placeholder(obj, key)
        annotations: Dict[str, Any] = {
            'node': self.strawberry_type(obj.node_type),
            'cursor': str,
        }
        self._object_fields(plain, obj, annotations)
        setattr(plain, '__annotations__', annotations)
        st_type = strawberry.type(plain, name=obj.name, description=obj.description)
        self._st_types[key] = st_type
        return st_type

    def _connection(self, obj: ConnectionObject, key: str) -> Any:
        plain = self._placeholder(obj, key)
        edge_st = self.strawberry_type(obj.edge_type)
        node_st = self.strawberry_type(obj.node_type)

        def edges(root):
            return [edge_st(node=node, cursor=encode_cursor(i)) for i, node in enumerate(_rows(root))]

        def nodes(root):
            return _rows(root)

        edges.__annotations__ = {'return': List[edge_st]}  # type: ignore[valid-type]
        nodes.__annotations__ = {'return': List[node_st]}  # type: ignore[valid-type]
        setattr(plain, 'edges', strawberry.field(resolver=edges, description="Edges of the connection."))
        setattr(plain, 'nodes', strawberry.field(resolver=nodes, description="Nodes of the connection, without edge data."))
        annotations: Dict[str, Any] = {}
        self._object_fields(plain, obj, annotations)
        setattr(plain, '__annotations__', annotations)
        st_type = strawberry.type(plain, name=obj.name, description=obj.description)
        self._st_types[key] = st_type
        return st_type

    def _input(self, obj: InputObject, key: str) -> Any:
        if not obj.arguments:
            raise ConfigurationError(f"Input {obj.name} declares no fields")
        plain = self._placeholder(obj, key)
        annotations: Dict[str, Any] = {}
        for adef in obj.arguments.values():
            annotations[adef.name] = self._annotation(adef.type, many=adef.many, null=not adef.required)
            if adef.required:
                setattr(plain, adef.name, strawberry.field(description=adef.description))
            else:
                setattr(plain, adef.name, strawberry.field(default=strawberry.UNSET, description=adef.description))
        setattr(plain, '__annotations__', annotations)
        st_input = strawberry.input(plain, name=obj.name, description=obj.description)
        self._st_types[key] = st_input
        _logger.debug("graphiform: exported input %s", obj.name)
        return st_input

    # ---------- resolvers ----------
    def resolver_field(self, resolver: Resolver, *, description: Optional[str] = None) -> Any:
        """Strawberry field whose arguments mirror the resolver's declared arguments."""
        arguments = resolver.arguments
        required = [a for a in arguments.values() if a.required]
        optional = [a for a in arguments.values() if not a.required]
        params = ['root', 'info'] + [a.name for a in required] + [f"{a.name}=None" for a in optional]
        passed = ', '.join(f"{a!r}: {a}" for a in arguments)
        func_name = f"_resolve_{camel_to_snake(resolver.name)}"
        src = f"def {func_name}({', '.join(params)}):\n" \
              f"    return _invoke(root, {{{passed}}})\n"

        def _invoke(root, values):
            return resolver.resolve(root, **{k: v for k, v in values.items() if is_present(v)})

        ns: Dict[str, Any] = {'_invoke': _invoke}
        exec(src, ns)
        generated_fn = ns[func_name]
        generated_fn.__module__ = __name__
        ann: Dict[str, Any] = {'info': StrawberryInfo}
        for adef in arguments.values():
            arg_ann = self._annotation(adef.type, many=adef.many, null=not adef.required)
            if adef.description:
                arg_ann = Annotated[arg_ann, strawberry.argument(description=adef.description)]
            ann[adef.name] = arg_ann
        ann['return'] = self._annotation(resolver.result_type, null=resolver.null)
        generated_fn.__annotations__ = ann
        return strawberry.field(resolver=generated_fn, description=description or resolver.description)

    def to_strawberry(self, query_fields: Mapping[str, Resolver], *, description: Optional[str] = None) -> Any:
        """Build a `strawberry.Schema` whose Query exposes `query_fields` (field name -> resolver)."""
        if not query_fields:
            raise ConfigurationError("At least one query field is required")
        query_plain = type('Query', (), {})
        query_plain.__module__ = __name__
        for fname, resolver in query_fields.items():
            setattr(query_plain, fname, self.resolver_field(resolver))
        query = strawberry.type(query_plain, name='Query', description=description)
        if self.strawberry_config is not None:
            return strawberry.Schema(query=query, config=self.strawberry_config)
        return strawberry.Schema(query=query)


def to_strawberry(context: Any, query_fields: Mapping[str, Resolver], **kwargs) -> Any:
    return StrawberryExporter(context).to_strawberry(query_fields, **kwargs)
