"""
Notification Service — dispatches notifications through pluggable senders.

Every send is audited the same way the pricing engine audits calculations:

    notification_sent → notification_result      (sender returned)
    notification_error                           (any failure, re-raised)

send_bulk() and send_with_retry() are the only places that catch failures,
to aggregate per-recipient results and to retry delivery respectively.
"""

from __future__ import annotations

import logging
import time
from types import MappingProxyType
from typing import Any, Callable, Iterable, Mapping, Optional

from pricing_automation.config import get_settings
from pricing_automation.exceptions import InvalidInputError, UnknownChannelError
from pricing_automation.models.schemas import ChannelStats, NotificationResult, NotificationStats
from pricing_automation.notifications.registry import SenderRegistry
from pricing_automation.notifications.validation import validate_payload
from pricing_automation.services.audit_service import AuditService
from pricing_automation.utils.registry import normalize_key

logger = logging.getLogger(__name__)

OP_SENT = "notification_sent"
OP_RESULT = "notification_result"
OP_ERROR = "notification_error"

# Caller errors are surfaced immediately, never retried
_NON_RETRYABLE = (InvalidInputError, UnknownChannelError)


class NotificationService:
    """Sends notifications on any registered channel."""

    def __init__(
        self,
        registry: SenderRegistry,
        audit: AuditService,
        retry_delay: Optional[float] = None,
        max_retries: Optional[int] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        settings = get_settings()
        self.registry = registry
        self.audit = audit
        self.retry_delay = (
            settings.notification_retry_delay_seconds if retry_delay is None else retry_delay
        )
        self.max_retries = settings.notification_max_retries if max_retries is None else max_retries
        self._sleep = sleep

    # ── Single send ──────────────────────────────────────

    def send(self, channel: Any, payload: Mapping[str, Any]) -> bool:
        """
        Validate, dispatch and audit one notification.
        Returns the sender's outcome; any exception is audited and re-raised.
        """
        data = dict(payload or {})
        label = _channel_label(channel)
        recipient = _recipient_of(data)

        try:
            sender = self.registry.resolve(channel)
            validate_payload(label, data, self.registry.required_fields(channel))

            self.audit.info(OP_SENT, {"channel": label, "recipient": recipient})
            result = bool(sender.send(MappingProxyType(data)))
            self.audit.info(OP_RESULT, {
                "channel": label,
                "success": result,
                "recipient": recipient,
            })
            return result

        except Exception as exc:
            self.audit.error(OP_ERROR, {
                "channel": label,
                "recipient": recipient,
                "error_type": type(exc).__name__,
                "error": str(exc),
            })
            raise

    # ── Bulk send ────────────────────────────────────────

    def send_bulk(
        self,
        channel: Any,
        recipients: Iterable[Any],
        payload: Mapping[str, Any],
    ) -> dict[str, NotificationResult]:
        """
        Send *payload* to every recipient independently. A failure for one
        recipient is captured in its result and never aborts the others.
        """
        if isinstance(recipients, (str, bytes)):
            raise InvalidInputError(
                "recipients must be a list of recipients, not a single string",
                field="recipients",
                value=recipients,
            )
        label = _channel_label(channel)
        results: dict[str, NotificationResult] = {}

        for recipient in recipients:
            key = str(recipient)
            data = {**(payload or {}), "recipient": recipient}
            try:
                success = self.send(channel, data)
                results[key] = NotificationResult(channel=label, recipient=key, success=success)
            except Exception as exc:
                logger.warning(f"[{label}] bulk delivery to {key} failed: {exc}")
                results[key] = NotificationResult(
                    channel=label, recipient=key, success=False, error=str(exc)
                )

        succeeded = sum(1 for r in results.values() if r.success)
        logger.info(f"[{label}] bulk send: {succeeded}/{len(results)} delivered")
        return results

    # ── Send with retry ──────────────────────────────────

    def send_with_retry(
        self,
        channel: Any,
        payload: Mapping[str, Any],
        max_retries: Optional[int] = None,
    ) -> bool:
        """
        Make up to *max_retries* delivery attempts in total.

        A False outcome is retried; the first success returns immediately. A
        delivery exception on the final attempt propagates. Caller errors
        (invalid payload, unknown channel) propagate at once without retry.
        The configured delay is slept between attempts, never after the last.
        """
        attempts = self.max_retries if max_retries is None else max_retries
        if isinstance(attempts, bool) or not isinstance(attempts, int) or attempts < 1:
            raise InvalidInputError(
                "max_retries must be a positive integer", field="max_retries", value=attempts
            )

        label = _channel_label(channel)
        for attempt in range(1, attempts + 1):
            try:
                if self.send(channel, payload):
                    return True
                logger.warning(f"[{label}] attempt {attempt}/{attempts} was not delivered")
            except _NON_RETRYABLE:
                raise
            except Exception as exc:
                if attempt >= attempts:
                    raise
                logger.warning(f"[{label}] attempt {attempt}/{attempts} failed: {exc}")

            if attempt < attempts:
                self._sleep(self.retry_delay)

        return False

    # ── Statistics ───────────────────────────────────────

    def get_notification_stats(self) -> NotificationStats:
        """Derived from the audit log; no separate counters."""
        channels: dict[str, ChannelStats] = {}

        for entry in self.audit.get_trail(OP_SENT):
            name = entry.context.get("channel", "unknown")
            stats = channels.setdefault(name, ChannelStats())
            stats.sent += 1

        total_succeeded = 0
        for entry in self.audit.get_trail(OP_RESULT):
            if not entry.context.get("success"):
                continue
            total_succeeded += 1
            name = entry.context.get("channel", "unknown")
            stats = channels.setdefault(name, ChannelStats())
            stats.succeeded += 1

        total_sent = sum(s.sent for s in channels.values())
        return NotificationStats(
            total_sent=total_sent,
            total_succeeded=total_succeeded,
            total_errors=self.audit.count(OP_ERROR),
            success_rate=(total_succeeded / total_sent) if total_sent else 0.0,
            channels=channels,
        )


# ── Helpers (module-level) ───────────────────────────────

def _channel_label(channel: Any) -> str:
    try:
        return normalize_key(channel)
    except InvalidInputError:
        return str(channel)


def _recipient_of(payload: Mapping[str, Any]) -> str:
    recipient = payload.get("recipient")
    return str(recipient) if recipient not in (None, "") else "unknown"
