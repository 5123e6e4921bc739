"""
Registry base — maps a type identifier to a factory for a strategy object.

Replaces if/elif chains on a type tag: adding a new type is a new
registration, never a new branch. Unknown identifiers fail closed.

Registration is expected at startup (single writer). The internal lock only
keeps the mapping consistent; it does not order registrations against
concurrent resolve() calls.
"""

from __future__ import annotations

import logging
import threading
from enum import Enum
from typing import Any, Callable, Generic, TypeVar

from pricing_automation.exceptions import InvalidInputError, RegistryError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def normalize_key(key: Any) -> str:
    """Enum members use their value; strings are stripped and lower-cased."""
    if isinstance(key, Enum):
        key = key.value
    if not isinstance(key, str) or not key.strip():
        raise InvalidInputError(f"Invalid registry key: {key!r}", field="type", value=key)
    return key.strip().lower()


class Registry(Generic[T]):
    """Ordered mapping of normalised type key → zero-argument factory."""

    kind: str = "strategy"

    def __init__(self):
        self._factories: dict[str, Callable[[], T]] = {}
        self._lock = threading.Lock()

    # ── Registration ─────────────────────────────────────

    def register(self, key: Any, factory: Callable[[], T], *, replace: bool = False) -> str:
        """Register *factory* under *key* and return the normalised key."""
        if not callable(factory):
            raise RegistryError(f"Factory for {self.kind} '{key}' is not callable")

        name = normalize_key(key)
        with self._lock:
            if name in self._factories and not replace:
                raise RegistryError(f"{self.kind.capitalize()} '{name}' is already registered")
            self._factories[name] = factory

        logger.debug(f"Registered {self.kind} '{name}'")
        return name

    def unregister(self, key: Any) -> None:
        name = normalize_key(key)
        with self._lock:
            if name not in self._factories:
                raise self._miss(name)
            del self._factories[name]

    # ── Lookup ───────────────────────────────────────────

    def resolve(self, key: Any) -> T:
        """Build a fresh instance for *key*; unknown keys raise the miss error."""
        name = self._normalize_for_lookup(key)
        with self._lock:
            factory = self._factories.get(name)
        if factory is None:
            raise self._miss(name)
        return factory()

    def is_registered(self, key: Any) -> bool:
        try:
            name = normalize_key(key)
        except InvalidInputError:
            return False
        with self._lock:
            return name in self._factories

    def registered_types(self) -> list[str]:
        """Registered keys in registration order."""
        with self._lock:
            return list(self._factories)

    def __contains__(self, key: Any) -> bool:
        return self.is_registered(key)

    def __len__(self) -> int:
        with self._lock:
            return len(self._factories)

    # ── Subclass hooks ───────────────────────────────────

    def _normalize_for_lookup(self, key: Any) -> str:
        try:
            return normalize_key(key)
        except InvalidInputError:
            raise self._miss(str(key)) from None

    def _miss(self, name: str) -> Exception:
        return RegistryError(f"Unknown {self.kind}: {name}")
