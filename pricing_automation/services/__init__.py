"""Services — AuditService, PricingService, NotificationService."""

from pricing_automation.services.audit_service import AuditService
from pricing_automation.services.pricing_service import PricingService
from pricing_automation.services.notification_service import NotificationService

__all__ = ["AuditService", "PricingService", "NotificationService"]
