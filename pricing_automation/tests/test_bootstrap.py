"""
Tests: Settings and the composition root.

Run with:
    pytest pricing_automation/tests/test_bootstrap.py -v
"""

import pytest

from pricing_automation.bootstrap import (
    configure,
    build_audit_service,
    build_notification_service,
    build_pricing_service,
)
from pricing_automation.config import Settings, get_settings
from pricing_automation.persistence.quote_repository import QuoteRepository
from pricing_automation.services.audit_service import AuditService


class TestSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("NOTIFICATION_MAX_RETRIES", raising=False)
        settings = Settings(_env_file=None)
        assert settings.notification_max_retries == 3
        assert settings.notification_retry_delay_seconds == 1.0
        assert settings.log_level == "INFO"
        assert "debug" not in Settings.model_fields

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("NOTIFICATION_MAX_RETRIES", "5")
        monkeypatch.setenv("notification_retry_delay_seconds", "0.25")
        settings = Settings(_env_file=None)
        assert settings.notification_max_retries == 5
        assert settings.notification_retry_delay_seconds == 0.25

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()


class TestBootstrap:
    def test_pricing_service_wired_with_builtin_rules(self):
        service = build_pricing_service()
        assert service.calculate_price(100.0, "percentage", 20, 2) == pytest.approx(160.0)
        assert service.get_calculation_stats().total_calculations == 1

    def test_shared_audit_log(self):
        audit = AuditService(mirror_to_logging=False)
        pricing = build_pricing_service(audit=audit, repository=QuoteRepository())
        notifications = build_notification_service(audit=audit)
        pricing.calculate_price(10.0, "fixed", 1)
        notifications.send("push", {"device_token": "tok", "message": "Price dropped"})

        operations = [e.operation for e in audit.get_all()]
        assert operations == [
            "price_attempt",
            "price_result",
            "notification_sent",
            "notification_result",
        ]
        assert pricing.get_calculation_stats().total_calculations == 1
        assert notifications.get_notification_stats().total_sent == 1

    def test_notification_service_uses_settings(self):
        settings = Settings(_env_file=None, notification_max_retries=7, notification_retry_delay_seconds=0)
        service = build_notification_service(settings=settings)
        assert service.max_retries == 7
        assert service.retry_delay == 0

    def test_audit_mirror_follows_settings(self):
        settings = Settings(_env_file=None, audit_mirror_to_logging=False)
        assert build_audit_service(settings).mirror_to_logging is False

    def test_configure_returns_given_settings(self):
        settings = Settings(_env_file=None, log_level="DEBUG")
        assert configure(settings) is settings
