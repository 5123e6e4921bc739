"""
Sender Registry — notification channel → sender factory, plus the payload
fields each channel requires.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable

from pricing_automation.exceptions import UnknownChannelError
from pricing_automation.notifications.senders import (
    BaseSender,
    DiscordSender,
    EmailSender,
    PushSender,
    SlackSender,
    SmsSender,
)
from pricing_automation.notifications.validation import CHANNEL_REQUIREMENTS
from pricing_automation.utils.registry import Registry, normalize_key

logger = logging.getLogger(__name__)


class SenderRegistry(Registry[BaseSender]):
    """Registry of senders; unknown channels raise UnknownChannelError."""

    kind = "notification channel"

    def __init__(self):
        super().__init__()
        self._required_fields: dict[str, tuple[str, ...]] = {}

    def register(
        self,
        key: Any,
        factory: Callable[[], BaseSender],
        required_fields: Iterable[str] = (),
        *,
        replace: bool = False,
    ) -> str:
        name = super().register(key, factory, replace=replace)
        with self._lock:
            self._required_fields[name] = tuple(required_fields)
        return name

    def unregister(self, key: Any) -> None:
        super().unregister(key)
        with self._lock:
            self._required_fields.pop(normalize_key(key), None)

    def required_fields(self, key: Any) -> tuple[str, ...]:
        name = self._normalize_for_lookup(key)
        with self._lock:
            if name not in self._factories:
                raise self._miss(name)
            return self._required_fields.get(name, ())

    def _miss(self, name: str) -> Exception:
        return UnknownChannelError(name)


def default_sender_registry() -> SenderRegistry:
    """Build a registry holding the five built-in (log-only) senders."""
    registry = SenderRegistry()
    for sender_cls in (EmailSender, SmsSender, PushSender, SlackSender, DiscordSender):
        registry.register(
            sender_cls.channel,
            sender_cls,
            required_fields=CHANNEL_REQUIREMENTS[sender_cls.channel],
        )
    logger.debug(f"Default sender registry: {registry.registered_types()}")
    return registry
