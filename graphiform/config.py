from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, Optional

from strawberry.schema.config import StrawberryConfig

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from .core.nodes import Kind

__all__ = ['SchemaConfig', 'DEBUG_ENV_VAR']

DEBUG_ENV_VAR = 'GRAPHIFORM_DEBUG'


def _default_bases() -> Dict['Kind', type]:
    from .core.nodes import DEFAULT_BASES  # local import to avoid cycles
    return dict(DEFAULT_BASES)


@dataclass
class SchemaConfig:
    """Settings shared by every builder of a SchemaContext.

    bases: kind -> class instantiated for that kind. Replace an entry with a
    subclass of the default to customize a kind; remove it and builds of that
    kind fail with ConfigurationError.
    """
    bases: Dict['Kind', type] = field(default_factory=_default_bases)
    strawberry_config: Optional['StrawberryConfig'] = None
    debug: bool = False

    def __post_init__(self):
        if self.debug:
            logging.getLogger("graphiform").setLevel(logging.DEBUG)

    @classmethod
    def from_env(cls, **overrides) -> 'SchemaConfig':
        debug = os.getenv(DEBUG_ENV_VAR, '').strip().lower() not in ('', '0', 'false', 'no')
        overrides.setdefault('debug', debug)
        return cls(**overrides)
