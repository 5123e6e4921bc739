"""
Error taxonomy shared by the pricing engine and the notification dispatcher.

Caller errors (bad input, unknown identifiers) are never retried. Delivery
failures are retried by NotificationService.send_with_retry only.
"""

from __future__ import annotations

from typing import Any, Optional


class PricingAutomationError(Exception):
    """Base exception for all package errors."""


class InvalidInputError(PricingAutomationError, ValueError):
    """Raised when a caller-supplied value is missing or out of range."""

    def __init__(self, message: str, field: Optional[str] = None, value: Any = None):
        super().__init__(message)
        self.field = field
        self.value = value


class RegistryError(PricingAutomationError):
    """Raised on registry misuse, e.g. registering the same key twice."""


class UnknownTypeError(RegistryError, LookupError):
    """Raised when no pricing rule is registered for a discount type."""

    def __init__(self, discount_type: str):
        super().__init__(f"Unsupported discount type: {discount_type}")
        self.discount_type = discount_type


class UnknownChannelError(RegistryError, LookupError):
    """Raised when no sender is registered for a notification channel."""

    def __init__(self, channel: str):
        super().__init__(f"Unsupported notification type: {channel}")
        self.channel = channel


class DeliveryFailureError(PricingAutomationError):
    """Raised by senders when an external delivery backend fails."""

    def __init__(self, message: str, channel: Optional[str] = None):
        super().__init__(message)
        self.channel = channel


class DatabaseFailureError(PricingAutomationError):
    """Raised when an external persistence collaborator fails."""
