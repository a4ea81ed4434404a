from __future__ import annotations

from typing import Any

from ..errors import ConfigurationError
from .base import BaseModelAdapter, ModelDescriptor


def as_model(model: Any) -> Any:
    """Return a model descriptor for `model`.

    Objects already exposing `identity()` pass through; SQLAlchemy mapped
    classes are wrapped in SQLAlchemyModel.
    """
    if callable(getattr(model, 'identity', None)):
        return model
    if isinstance(model, type) and hasattr(model, '__mapper__'):
        from .sqla import SQLAlchemyModel
        return SQLAlchemyModel(model)
    raise ConfigurationError(f"Cannot derive a schema from {model!r}: no identity() and not a mapped class")


__all__ = [
    'BaseModelAdapter',
    'ModelDescriptor',
    'SQLAlchemyModel',
    'SelectCollection',
    'as_model',
]


def __getattr__(name: str):  # PEP 562 lazy exports
    if name in {'SQLAlchemyModel', 'SelectCollection'}:
        from . import sqla as _sqla
        return getattr(_sqla, name)
    raise AttributeError(name)
