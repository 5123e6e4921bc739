"""
Audit Service — append-only record of engine and dispatcher operations.

Doubles as the `Logger` collaborator: log(level, message, context) with
info / warning / error shortcuts. Statistics are derived from these entries
rather than from separate counters.
"""

from __future__ import annotations

import logging
import threading
from copy import deepcopy
from typing import Any, Optional, Union

from pricing_automation.exceptions import InvalidInputError
from pricing_automation.models.enums import AuditLevel
from pricing_automation.models.schemas import AuditEntry

logger = logging.getLogger(__name__)

_LOGGING_LEVELS = {
    AuditLevel.DEBUG: logging.DEBUG,
    AuditLevel.INFO: logging.INFO,
    AuditLevel.WARNING: logging.WARNING,
    AuditLevel.ERROR: logging.ERROR,
}


class AuditService:
    """
    Records operations in call order. Entries are immutable once recorded:
    the context is copied on the way in, and every read hands out deep
    copies, so neither the caller nor a reader can rewrite history.
    """

    def __init__(self, mirror_to_logging: bool = True):
        self.mirror_to_logging = mirror_to_logging
        self._entries: list[AuditEntry] = []
        self._lock = threading.Lock()

    def record(
        self,
        operation: str,
        context: Optional[dict[str, Any]] = None,
        level: Union[AuditLevel, str] = AuditLevel.INFO,
    ) -> AuditEntry:
        """Record an audit entry and return it."""
        level = _coerce_level(level)
        snapshot = deepcopy(context) if context else {}

        with self._lock:
            entry = AuditEntry(
                operation=operation,
                level=level,
                context=snapshot,
                sequence=len(self._entries) + 1,
            )
            self._entries.append(entry)

        if self.mirror_to_logging:
            logger.log(_LOGGING_LEVELS[level], f"[AUDIT] {operation}: {snapshot}")

        return entry.model_copy(deep=True)

    # ── Logger interface ─────────────────────────────────

    def log(self, level: Union[AuditLevel, str], message: str, context: Optional[dict[str, Any]] = None) -> None:
        self.record(message, context, level=level)

    def info(self, message: str, context: Optional[dict[str, Any]] = None) -> None:
        self.record(message, context, level=AuditLevel.INFO)

    def warning(self, message: str, context: Optional[dict[str, Any]] = None) -> None:
        self.record(message, context, level=AuditLevel.WARNING)

    def error(self, message: str, context: Optional[dict[str, Any]] = None) -> None:
        self.record(message, context, level=AuditLevel.ERROR)

    # ── Queries ──────────────────────────────────────────

    def get_trail(self, operation: Optional[str] = None, *, prefix: Optional[str] = None) -> list[AuditEntry]:
        """Return entries matching *operation* exactly and/or starting with *prefix*."""
        with self._lock:
            entries = [e.model_copy(deep=True) for e in self._entries]
        if operation is not None:
            entries = [e for e in entries if e.operation == operation]
        if prefix is not None:
            entries = [e for e in entries if e.operation.startswith(prefix)]
        return entries

    def get_all(self) -> list[AuditEntry]:
        """Return all audit entries (for debugging)."""
        return self.get_trail()

    def count(self, operation: Optional[str] = None) -> int:
        return len(self.get_trail(operation))

    def last(self, operation: Optional[str] = None) -> Optional[AuditEntry]:
        entries = self.get_trail(operation)
        return entries[-1] if entries else None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


def _coerce_level(level: Union[AuditLevel, str]) -> AuditLevel:
    if isinstance(level, AuditLevel):
        return level
    try:
        return AuditLevel(str(level).lower())
    except ValueError:
        raise InvalidInputError(f"Unknown audit level: {level}", field="level", value=level) from None
