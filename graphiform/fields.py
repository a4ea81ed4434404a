"""Declaring fields and associations on a model's schema objects.

A single declaration fans out to every kind that cares about the field: the
Type (readable), the Input (writable), the Filter (filterable) and the Sort
(sortable). Declare fields before the model's base resolver is first built:
the base resolver only gets a `sort` argument when the Sort has fields.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional

from .core.nodes import EnumObject
from .input_types import comparison_input_for

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from .core.factory import ModelSchema

__all__ = ['SortDirection', 'declare_field', 'declare_association']

_logger = logging.getLogger("graphiform")


class SortDirection(Enum):
    asc = 'asc'
    desc = 'desc'


def _filter_type(type_: Any) -> Any:
    # enums (mirrors or Python enums) filter by equality on the enum itself
    if isinstance(type_, EnumObject) or (isinstance(type_, type) and issubclass(type_, Enum)):
        return type_
    return comparison_input_for(type_)


def declare_field(
    schema: 'ModelSchema',
    name: str,
    type_: Any,
    *,
    null: bool = True,
    many: bool = False,
    readable: bool = True,
    writable: bool = False,
    filterable: bool = True,
    sortable: bool = True,
    description: Optional[str] = None,
) -> None:
    if readable:
        schema.type().field(name, type_, null=null, many=many, description=description)
    if writable:
        schema.input().argument(name, type_, many=many, description=description)
    if filterable and not many:
        filter_type = _filter_type(type_)
        if filter_type is None:
            _logger.warning("graphiform: no filter type for %s.%s (%r); not filterable", schema.base_name, name, type_)
        else:
            schema.filter().argument(name, filter_type, description=description)
    if sortable and not many:
        schema.sort().argument(name, SortDirection, description=description)


def declare_association(
    schema: 'ModelSchema',
    name: str,
    target: 'ModelSchema',
    *,
    many: bool = True,
    description: Optional[str] = None,
) -> None:
    """Add a relation field resolved by the target model's filtering resolver.

    To-many relations are exposed as the target's Connection, to-one relations
    as the target's Type.
    """
    if many:
        resolver = target.create_resolver(name, target.connection())
    else:
        resolver = target.create_resolver(name, target.type(), null=True)
    schema.type().field(
        name,
        resolver.result_type,
        null=resolver.null,
        description=description,
        resolver=resolver,
    )
