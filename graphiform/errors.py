"""Error taxonomy for graphiform.

Build-time problems derive from ConfigurationError and are fatal for the
schema being generated. ResolutionError is raised while serving a request and
never touches the shared registry.
"""
from __future__ import annotations

from typing import Any, Optional

__all__ = [
    'GraphiformError',
    'ConfigurationError',
    'ConstructionError',
    'NamingCollisionError',
    'ResolutionError',
]


class GraphiformError(Exception):

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(GraphiformError):
    """A base kind is missing or a builder cannot resolve a dependency."""


class ConstructionError(ConfigurationError):

    def __init__(self, message: str, namespace: str, name: str):
        super().__init__(message)
        self.namespace = namespace
        self.name = name

    def __str__(self):
        return '[{}:{}] {}'.format(self.namespace, self.name, self.message)


class NamingCollisionError(ConfigurationError):

    def __init__(self, namespace: str, name: str, owner: Any, existing_owner: Any):
        message = "{!r} in namespace '{}' is already owned by {!r}, requested by {!r}".format(
            name, namespace, existing_owner, owner)
        super().__init__(message)
        self.namespace = namespace
        self.name = name
        self.owner = owner
        self.existing_owner = existing_owner


class ResolutionError(GraphiformError):

    def __init__(self, message: str, resolver: Optional[str] = None):
        super().__init__(message)
        self.resolver = resolver

    def __str__(self):
        if self.resolver:
            return '[{}] {}'.format(self.resolver, self.message)
        return self.message
