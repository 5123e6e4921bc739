"""
Notification senders — one delivery strategy per channel.

The built-in senders are log-only outbound adapters: they write the delivery
to the application log and report success. Production backends (SMTP, an SMS
gateway, FCM/APNs, webhook clients) subclass BaseSender and are registered in
their place. Backends signal failures by raising DeliveryFailureError or by
returning False.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Mapping

from pricing_automation.models.enums import NotificationChannel

logger = logging.getLogger(__name__)


class BaseSender(ABC):
    """Abstract base for all channel senders.

    Concrete senders name their channel with a `channel` class attribute.
    """

    @property
    @abstractmethod
    def channel(self) -> str:
        ...

    @abstractmethod
    def send(self, payload: Mapping[str, Any]) -> bool:
        """Deliver *payload*; return True on success."""
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}(channel={self.channel!r})"


class EmailSender(BaseSender):
    channel = NotificationChannel.EMAIL.value

    def send(self, payload: Mapping[str, Any]) -> bool:
        subject = payload.get("subject") or "Notification"
        logger.info(f"[EMAIL] to {payload['recipient']} | {subject}: {payload['message']}")
        return True


class SmsSender(BaseSender):
    channel = NotificationChannel.SMS.value

    def send(self, payload: Mapping[str, Any]) -> bool:
        logger.info(f"[SMS] to {payload['recipient']}: {payload['message']}")
        return True


class PushSender(BaseSender):
    channel = NotificationChannel.PUSH.value

    def send(self, payload: Mapping[str, Any]) -> bool:
        logger.info(f"[PUSH] to {payload['device_token']}: {payload['message']}")
        return True


class WebhookSender(BaseSender):
    """Chat webhook delivery shared by Slack and Discord. Abstract: no channel of its own."""

    def send(self, payload: Mapping[str, Any]) -> bool:
        logger.info(
            f"[{self.channel.upper()}] webhook {payload['webhook_url']}: {payload['message']}"
        )
        return True


class SlackSender(WebhookSender):
    channel = NotificationChannel.SLACK.value


class DiscordSender(WebhookSender):
    channel = NotificationChannel.DISCORD.value
