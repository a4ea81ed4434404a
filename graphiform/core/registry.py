"""Namespace registry: get-or-create of schema objects keyed by (namespace, name).

Each key has its own re-entrant lock. The builder runs under that lock, the
result is registered, and the optional `decorate` step runs while the lock is
still held. A lookup of the same key from inside `decorate` (same thread)
therefore sees the registered, still-being-decorated object, while other
threads wait until decoration finishes.
"""
from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from ..errors import ConstructionError, GraphiformError, NamingCollisionError
from .nodes import LifecycleState

__all__ = ['Namespace', 'NamespaceRegistry']

_logger = logging.getLogger("graphiform")

_MISSING = object()


class Namespace:
    """Named container of uniquely keyed schema objects."""

    def __init__(self, name: str):
        self.name = name
        self._objects: Dict[str, Any] = {}
        self._owners: Dict[str, Any] = {}
        self._locks: Dict[str, threading.RLock] = {}
        self._locks_guard = threading.Lock()

    def __contains__(self, name: str) -> bool:
        return name in self._objects

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._objects))

    def __len__(self) -> int:
        return len(self._objects)

    def get(self, name: str, default: Any = None) -> Any:
        """Registered object for `name`; waits while another thread is building it."""
        with self._key_lock(name):
            return self._objects.get(name, default)

    def owner_of(self, name: str) -> Any:
        return self._owners.get(name)

    def _key_lock(self, name: str) -> threading.RLock:
        with self._locks_guard:
            lock = self._locks.get(name)
            if lock is None:
                lock = threading.RLock()
                self._locks[name] = lock
            return lock

    def get_or_create(
        self,
        name: str,
        builder: Callable[[], Any],
        *,
        owner: Any = None,
        decorate: Optional[Callable[[Any], None]] = None,
    ) -> Any:
        if not name:
            raise ValueError("Schema object name must be a non-empty string")
        with self._key_lock(name):
            existing = self._objects.get(name, _MISSING)
            if existing is not _MISSING:
                existing_owner = self._owners.get(name)
                if owner is not None and existing_owner is not None and owner != existing_owner:
                    raise NamingCollisionError(self.name, name, owner, existing_owner)
                return existing
            try:
                obj = builder()
            except GraphiformError:
                raise
            except Exception as e:
                raise ConstructionError(f"Builder failed: {e}", self.name, name) from e
            if obj is None:
                raise ConstructionError("Builder returned no object", self.name, name)
            self._objects[name] = obj
            self._owners[name] = owner
            _set_state(obj, LifecycleState.REGISTERED)
            if decorate is not None:
                try:
                    decorate(obj)
                except Exception:
                    # never leave a half-decorated entry behind
                    del self._objects[name]
                    del self._owners[name]
                    raise
            _set_state(obj, LifecycleState.DECORATED)
            _logger.debug("graphiform: registered %s:%s (owner=%s)", self.name, name, owner)
            return obj


def _set_state(obj: Any, state: LifecycleState) -> None:
    if hasattr(obj, 'state'):
        obj.state = state


class NamespaceRegistry:
    """A set of namespaces, one per schema-object kind, created on first use."""

    def __init__(self):
        self._namespaces: Dict[str, Namespace] = {}
        self._guard = threading.Lock()

    def namespace(self, name: str) -> Namespace:
        with self._guard:
            ns = self._namespaces.get(name)
            if ns is None:
                ns = Namespace(name)
                self._namespaces[name] = ns
            return ns

    def get_or_create(
        self,
        namespace: str,
        name: str,
        builder: Callable[[], Any],
        *,
        owner: Any = None,
        decorate: Optional[Callable[[Any], None]] = None,
    ) -> Any:
        return self.namespace(namespace).get_or_create(name, builder, owner=owner, decorate=decorate)

    def get(self, namespace: str, name: str, default: Any = None) -> Any:
        ns = self._namespaces.get(namespace)
        if ns is None:
            return default
        return ns.get(name, default)

    def names(self, namespace: str) -> List[str]:
        ns = self._namespaces.get(namespace)
        return list(ns) if ns is not None else []

    def __contains__(self, key: Tuple[str, str]) -> bool:
        namespace, name = key
        ns = self._namespaces.get(namespace)
        return ns is not None and name in ns
