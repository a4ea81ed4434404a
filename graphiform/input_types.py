"""
Comparison input types used as Filter argument types.

A declared field `title: str` becomes `title: StringComparison` on the model's
Filter, so clients can write `where: {title: {like: "%graph%"}}`. The plain
dict produced from these inputs (`{"like": "%graph%"}`) is what collections
receive in `apply_filters`.
"""

from datetime import date, datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

import strawberry


@strawberry.input(description="Comparison operators for string fields.")
class StringComparison:
    eq: Optional[str] = strawberry.UNSET
    ne: Optional[str] = strawberry.UNSET
    like: Optional[str] = strawberry.UNSET
    ilike: Optional[str] = strawberry.UNSET
    contains: Optional[str] = strawberry.UNSET
    starts_with: Optional[str] = strawberry.UNSET
    ends_with: Optional[str] = strawberry.UNSET
    in_: Optional[List[str]] = strawberry.field(name="in", default=strawberry.UNSET)
    not_in: Optional[List[str]] = strawberry.UNSET


@strawberry.input(description="Comparison operators for integer fields.")
class IntComparison:
    eq: Optional[int] = strawberry.UNSET
    ne: Optional[int] = strawberry.UNSET
    gt: Optional[int] = strawberry.UNSET
    gte: Optional[int] = strawberry.UNSET
    lt: Optional[int] = strawberry.UNSET
    lte: Optional[int] = strawberry.UNSET
    in_: Optional[List[int]] = strawberry.field(name="in", default=strawberry.UNSET)
    not_in: Optional[List[int]] = strawberry.UNSET


@strawberry.input(description="Comparison operators for float fields.")
class FloatComparison:
    eq: Optional[float] = strawberry.UNSET
    ne: Optional[float] = strawberry.UNSET
    gt: Optional[float] = strawberry.UNSET
    gte: Optional[float] = strawberry.UNSET
    lt: Optional[float] = strawberry.UNSET
    lte: Optional[float] = strawberry.UNSET


@strawberry.input(description="Comparison operators for datetime fields.")
class DateTimeComparison:
    eq: Optional[datetime] = strawberry.UNSET
    ne: Optional[datetime] = strawberry.UNSET
    gt: Optional[datetime] = strawberry.UNSET
    gte: Optional[datetime] = strawberry.UNSET
    lt: Optional[datetime] = strawberry.UNSET
    lte: Optional[datetime] = strawberry.UNSET


@strawberry.input(description="Comparison operators for date fields.")
class DateComparison:
    eq: Optional[date] = strawberry.UNSET
    ne: Optional[date] = strawberry.UNSET
    gt: Optional[date] = strawberry.UNSET
    gte: Optional[date] = strawberry.UNSET
    lt: Optional[date] = strawberry.UNSET
    lte: Optional[date] = strawberry.UNSET


@strawberry.input(description="Comparison operators for UUID fields.")
class UUIDComparison:
    eq: Optional[UUID] = strawberry.UNSET
    ne: Optional[UUID] = strawberry.UNSET
    in_: Optional[List[UUID]] = strawberry.field(name="in", default=strawberry.UNSET)


@strawberry.input(description="Comparison operators for boolean fields.")
class BoolComparison:
    eq: Optional[bool] = strawberry.UNSET
    ne: Optional[bool] = strawberry.UNSET


# bool before int: bool is an int subclass
_COMPARISONS: Dict[type, Any] = {
    bool: BoolComparison,
    int: IntComparison,
    float: FloatComparison,
    str: StringComparison,
    datetime: DateTimeComparison,
    date: DateComparison,
    UUID: UUIDComparison,
}


def comparison_input_for(py_type: Any) -> Optional[Any]:
    """Comparison input matching a Python scalar type, None when there is none."""
    if not isinstance(py_type, type):
        return None
    for scalar, comparison in _COMPARISONS.items():
        if issubclass(py_type, scalar):
            return comparison
    return None


__all__ = [
    'StringComparison',
    'IntComparison',
    'FloatComparison',
    'DateTimeComparison',
    'DateComparison',
    'UUIDComparison',
    'BoolComparison',
    'comparison_input_for',
]
