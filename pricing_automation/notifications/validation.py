"""
Notification payload validation, applied at dispatch time before a sender
is invoked. Violations raise InvalidInputError naming the offending field.
"""

from __future__ import annotations

import re
from typing import Any, Iterable, Mapping

from pricing_automation.exceptions import InvalidInputError
from pricing_automation.models.enums import NotificationChannel

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
PHONE_PATTERN = re.compile(r"^\+?[1-9]\d{1,14}$")

# channel → fields that must be present and non-empty
CHANNEL_REQUIREMENTS: dict[str, tuple[str, ...]] = {
    NotificationChannel.EMAIL.value: ("recipient", "message"),
    NotificationChannel.SMS.value: ("recipient", "message"),
    NotificationChannel.PUSH.value: ("message", "device_token"),
    NotificationChannel.SLACK.value: ("message", "webhook_url"),
    NotificationChannel.DISCORD.value: ("message", "webhook_url"),
}

# channel → (field, pattern, error message)
FORMAT_CHECKS: dict[str, tuple[str, re.Pattern[str], str]] = {
    NotificationChannel.EMAIL.value: ("recipient", EMAIL_PATTERN, "Invalid email address"),
    NotificationChannel.SMS.value: ("recipient", PHONE_PATTERN, "Invalid phone number"),
}


def validate_payload(
    channel: str,
    payload: Mapping[str, Any],
    required_fields: Iterable[str] = (),
) -> None:
    """Check required fields, then any format rule registered for *channel*."""
    for field in required_fields:
        if _is_blank(payload.get(field)):
            raise InvalidInputError(
                f"Field '{field}' is required for {channel} notifications",
                field=field,
            )

    check = FORMAT_CHECKS.get(channel)
    if check is None:
        return
    field, pattern, message = check
    value = payload.get(field)
    if value is not None and not pattern.match(str(value)):
        raise InvalidInputError(f"{message}: {value}", field=field, value=value)


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False
