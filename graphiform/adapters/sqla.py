"""SQLAlchemy declarative models as graphiform models.

`SQLAlchemyModel` wraps a mapped class: identity from its import path, enum
declarations from `sqlalchemy.Enum` columns, and a default collection that is
an immutable `select()` wrapper able to filter and sort itself.
"""
from __future__ import annotations

import logging
import uuid as _py_uuid
from datetime import date, datetime
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Union

from sqlalchemy import Boolean, Date, DateTime, Float, Integer, Numeric, String, Uuid, and_, func, inspect, or_, select
from sqlalchemy import Enum as SAEnumType
from sqlalchemy.orm import Session
from sqlalchemy.sql import Select

from ..errors import ResolutionError
from .base import BaseModelAdapter

__all__ = ['OPERATOR_REGISTRY', 'SQLAlchemyModel', 'SelectCollection', 'criteria_expression', 'register_operator']

_logger = logging.getLogger("graphiform")

SessionSource = Union[Session, Callable[[], Session], None]

# Global operator registry (extensible)
OPERATOR_REGISTRY: Dict[str, Callable[[Any, Any], Any]] = {
    'eq': lambda col, v: col == v,
    'ne': lambda col, v: col != v,
    'lt': lambda col, v: col < v,
    'lte': lambda col, v: col <= v,
    'gt': lambda col, v: col > v,
    'gte': lambda col, v: col >= v,
    'like': lambda col, v: col.like(v),
    'ilike': lambda col, v: func.lower(col).like(func.lower(v)),
    'in': lambda col, v: col.in_(v if isinstance(v, (list, tuple, set)) else [v]),
    'not_in': lambda col, v: ~col.in_(v if isinstance(v, (list, tuple, set)) else [v]),
    'between': lambda col, v: col.between(v[0], v[1]),
    'contains': lambda col, v: col.contains(v),
    'starts_with': lambda col, v: col.like(f"{v}%"),
    'ends_with': lambda col, v: col.like(f"%{v}"),
}


def register_operator(name: str, fn: Callable[[Any, Any], Any]) -> None:
    OPERATOR_REGISTRY[name] = fn


def _column(model_cls: Any, name: str) -> Any:
    col = model_cls.__table__.c.get(name)
    if col is None:
        raise ResolutionError(f"Unknown column '{name}' on {model_cls.__name__}")
    return col


def criteria_expression(model_cls: Any, criteria: Mapping[str, Any]) -> Any:
    """Build a SQLAlchemy expression from a plain filter dict.

    `{col: value}` is equality, `{col: {op: value}}` applies registered
    operators, `OR: [criteria, ...]` ORs the remaining criteria with each branch.
    """
    exprs: List[Any] = []
    branches: List[Any] = []
    for key, value in (criteria or {}).items():
        if value is None:
            continue
        if key == 'OR':
            for branch in value:
                expr = criteria_expression(model_cls, branch)
                if expr is not None:
                    branches.append(expr)
            continue
        col = _column(model_cls, key)
        if not isinstance(value, Mapping):
            exprs.append(col == value)
            continue
        for op_name, op_value in value.items():
            if op_value is None:
                continue
            # in_ is the Python-side spelling of the `in` operator
            op_fn = OPERATOR_REGISTRY.get(op_name.rstrip('_'))
            if op_fn is None:
                raise ResolutionError(f"Unknown filter operator: {op_name}")
            exprs.append(op_fn(col, op_value))
    conjunction = and_(*exprs) if exprs else None
    if not branches:
        return conjunction
    if conjunction is not None:
        branches.insert(0, conjunction)
    return or_(*branches)


def dir_value(order_dir: Any) -> str:
    if order_dir is None:
        return 'asc'
    val = getattr(order_dir, 'value', order_dir)
    return str(val).lower()


class SelectCollection:
    """Lazily executed collection over a `select()` statement.

    Filtering and sorting return new collections; nothing touches the
    database until `first()` or iteration.
    """

    def __init__(self, model_cls: Any, stmt: Optional[Select] = None, session: SessionSource = None):
        self.model_cls = model_cls
        self.stmt = stmt if stmt is not None else select(model_cls)
        self._session = session

    def _derive(self, stmt: Select) -> 'SelectCollection':
        return SelectCollection(self.model_cls, stmt, self._session)

    def apply_filters(self, criteria: Mapping[str, Any]) -> 'SelectCollection':
        expr = criteria_expression(self.model_cls, criteria)
        if expr is None:
            return self
        return self._derive(self.stmt.where(expr))

    def apply_sorts(self, criteria: Mapping[str, Any]) -> 'SelectCollection':
        stmt = self.stmt
        for col_name, direction in (criteria or {}).items():
            if direction is None:
                continue
            col = _column(self.model_cls, col_name)
            stmt = stmt.order_by(col.desc() if dir_value(direction) == 'desc' else col.asc())
        return self._derive(stmt)

    def session(self) -> Session:
        source = self._session
        if source is None:
            raise ResolutionError(f"No session bound to the {self.model_cls.__name__} collection")
        return source() if callable(source) else source

    def first(self) -> Any:
        return self.session().scalars(self.stmt.limit(1)).first()

    def all(self) -> List[Any]:
        return list(self.session().scalars(self.stmt).all())

    def __iter__(self) -> Iterator[Any]:
        return iter(self.all())


def _sa_python_type(sqlatype: Any) -> Any:
    """Map a SQLAlchemy column type to a Python type; str when unknown."""
    # Enum is a String subclass: check it first
    if isinstance(sqlatype, SAEnumType):
        return getattr(sqlatype, 'enum_class', None) or str
    if isinstance(sqlatype, Boolean):
        return bool
    if isinstance(sqlatype, Integer):
        return int
    if isinstance(sqlatype, (Float, Numeric)):
        return float
    if isinstance(sqlatype, DateTime):
        return datetime
    if isinstance(sqlatype, Date):
        return date
    if isinstance(sqlatype, Uuid):
        return _py_uuid.UUID
    if isinstance(sqlatype, String):
        return str
    return str


class SQLAlchemyModel(BaseModelAdapter):
    name = 'sqlalchemy'

    def __init__(self, model_cls: Any, session: SessionSource = None):
        self.model_cls = model_cls
        self.session = session

    def __repr__(self):
        return f'<SQLAlchemyModel {self.identity()}>'

    def identity(self) -> str:
        return f"{self.model_cls.__module__}.{self.model_cls.__qualname__}"

    def description(self) -> Optional[str]:
        # Prefer model docstring, then table comment
        doc = self.model_cls.__doc__
        if doc:
            return doc.strip()
        return getattr(getattr(self.model_cls, '__table__', None), 'comment', None)

    def default_collection(self) -> SelectCollection:
        return SelectCollection(self.model_cls, session=self.session)

    def _enum_columns(self) -> Iterator[Any]:
        for col in self.model_cls.__table__.columns:
            if isinstance(col.type, SAEnumType):
                yield col

    def declared_enums(self) -> Dict[str, List[str]]:
        out: Dict[str, List[str]] = {}
        for col in self._enum_columns():
            enum_cls = getattr(col.type, 'enum_class', None)
            if enum_cls is not None:
                out[col.name] = [member.name for member in enum_cls]
            else:
                out[col.name] = list(col.type.enums)
        return out

    def declare_columns(self, schema: Any, *, exclude: tuple = ()) -> None:
        """Declare every mapped column on the model's schema objects.

        Primary keys are read-only; enum columns are typed by their enum mirror.
        """
        from ..fields import declare_field

        enum_cols = {c.name for c in self._enum_columns()}
        for col in self.model_cls.__table__.columns:
            if col.name in exclude:
                continue
            if col.name in enum_cols:
                py_t: Any = schema.enum_resolver(col.name)
            else:
                py_t = _sa_python_type(col.type)
            declare_field(
                schema,
                col.name,
                py_t,
                null=bool(col.nullable) and not col.primary_key,
                writable=not col.primary_key,
                description=col.comment,
            )

    def declare_relationships(self, schema: Any) -> None:
        """Declare every ORM relationship as an association field.

        Call after the columns of all related models are declared.
        """
        from ..fields import declare_association

        for rel in inspect(self.model_cls).relationships:
            target = schema.context.model(SQLAlchemyModel(rel.mapper.class_, self.session))
            declare_association(schema, rel.key, target, many=bool(rel.uselist), description=rel.doc)
            _logger.debug("graphiform: declared association %s.%s -> %s", schema.base_name, rel.key, target.base_name)
