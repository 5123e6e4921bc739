"""
Composition root — assembles registries and services with their
collaborators. Tests and host applications build services here, or wire
their own collaborators into the service constructors directly.

    from pricing_automation.bootstrap import build_pricing_service
    pricing = build_pricing_service()
    pricing.calculate_price(100.0, "percentage", 20, quantity=2)   # 160.0
"""

from __future__ import annotations

import logging
from typing import Optional

from pricing_automation.config import Settings, get_settings
from pricing_automation.notifications.registry import SenderRegistry, default_sender_registry
from pricing_automation.persistence.quote_repository import QuoteRepository
from pricing_automation.rules.registry import RuleRegistry, default_rule_registry
from pricing_automation.services.audit_service import AuditService
from pricing_automation.services.notification_service import NotificationService
from pricing_automation.services.pricing_service import PricingService
from pricing_automation.utils.logger import setup_logging

logger = logging.getLogger(__name__)


def build_audit_service(settings: Optional[Settings] = None) -> AuditService:
    settings = settings or get_settings()
    return AuditService(mirror_to_logging=settings.audit_mirror_to_logging)


def build_pricing_service(
    registry: Optional[RuleRegistry] = None,
    audit: Optional[AuditService] = None,
    repository: Optional[QuoteRepository] = None,
    settings: Optional[Settings] = None,
) -> PricingService:
    """Return a PricingService with the built-in rules unless told otherwise."""
    return PricingService(
        registry=registry if registry is not None else default_rule_registry(),
        audit=audit if audit is not None else build_audit_service(settings),
        repository=repository,
    )


def build_notification_service(
    registry: Optional[SenderRegistry] = None,
    audit: Optional[AuditService] = None,
    settings: Optional[Settings] = None,
) -> NotificationService:
    """Return a NotificationService with the built-in senders unless told otherwise."""
    settings = settings or get_settings()
    return NotificationService(
        registry=registry if registry is not None else default_sender_registry(),
        audit=audit if audit is not None else build_audit_service(settings),
        retry_delay=settings.notification_retry_delay_seconds,
        max_retries=settings.notification_max_retries,
    )


def configure(settings: Optional[Settings] = None) -> Settings:
    """Apply process-wide settings (logging) once at startup."""
    settings = settings or get_settings()
    setup_logging(settings.log_level)
    logger.info(f"{settings.app_name} configured (log level {settings.log_level})")
    return settings
