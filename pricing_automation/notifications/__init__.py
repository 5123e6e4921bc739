"""Notification channels — senders, payload validation and the sender registry."""

from pricing_automation.notifications.registry import SenderRegistry, default_sender_registry
from pricing_automation.notifications.senders import (
    BaseSender,
    DiscordSender,
    EmailSender,
    PushSender,
    SlackSender,
    SmsSender,
)
from pricing_automation.notifications.validation import CHANNEL_REQUIREMENTS, validate_payload

__all__ = [
    "BaseSender",
    "EmailSender",
    "SmsSender",
    "PushSender",
    "SlackSender",
    "DiscordSender",
    "SenderRegistry",
    "default_sender_registry",
    "CHANNEL_REQUIREMENTS",
    "validate_payload",
]
