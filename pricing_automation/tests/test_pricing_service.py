"""
Tests: Pricing engine — rule selection, clamping, auditing and stats.

Run with:
    pytest pricing_automation/tests/test_pricing_service.py -v
"""

import pytest

from pricing_automation.exceptions import DatabaseFailureError, InvalidInputError, UnknownTypeError
from pricing_automation.models.enums import AuditLevel, DiscountType
from pricing_automation.persistence.quote_repository import QuoteRepository
from pricing_automation.rules.base import PricingRule
from pricing_automation.rules.discount_rules import FixedDiscountRule, PercentageDiscountRule
from pricing_automation.rules.registry import default_rule_registry
from pricing_automation.services.audit_service import AuditService
from pricing_automation.services.pricing_service import PricingService


class NegativeRule(PricingRule):
    discount_type = "negative"

    def apply(self, base_price, quantity, params):
        return -50.0


class RecordingRule(PricingRule):
    """Captures the params it was called with."""

    discount_type = "recording"
    value_key = "amount"

    def __init__(self):
        self.seen = None

    def apply(self, base_price, quantity, params):
        self.seen = dict(params)
        return base_price * quantity


class BrokenRepository(QuoteRepository):
    def save_quote(self, quote):
        raise DatabaseFailureError("quotes table is read-only")


def _service(repository=None) -> PricingService:
    return PricingService(default_rule_registry(), AuditService(mirror_to_logging=False), repository)


def _operations(service: PricingService) -> list[str]:
    return [e.operation for e in service.audit.get_all()]


class TestCalculatePrice:
    def test_percentage_scenario(self):
        assert _service().calculate_price(100.0, "percentage", 20, 2, {}) == pytest.approx(160.0)

    def test_volume_scenario(self):
        params = {"thresholds": [[100, 0.15], [50, 0.10], [20, 0.05]]}
        result = _service().calculate_price(10.0, "volume", None, 100, params)
        assert result == pytest.approx(850.0)

    def test_seasonal_scenario(self):
        params = {"month": 12, "seasonal_discounts": {12: 0.25}}
        result = _service().calculate_price(100.0, DiscountType.SEASONAL, None, 5, params)
        assert result == pytest.approx(75.0)

    def test_fixed_via_enum(self):
        result = _service().calculate_price(100.0, DiscountType.FIXED, 30, 2)
        assert result == pytest.approx(140.0)

    def test_discount_value_overrides_params(self):
        result = _service().calculate_price(100.0, "percentage", 10, 1, {"discount_percent": 50})
        assert result == pytest.approx(90.0)

    def test_percent_in_params_only(self):
        result = _service().calculate_price(100.0, "percentage", None, 1, {"discount_percent": 50})
        assert result == pytest.approx(50.0)

    def test_zero_quantity(self):
        assert _service().calculate_price(100.0, "percentage", 10, 0) == 0.0

    def test_caller_params_not_mutated(self):
        params = {"thresholds": [[10, 0.1]]}
        _service().calculate_price(10.0, "percentage", 5, 1, params)
        assert params == {"thresholds": [[10, 0.1]]}

    def test_quote_details(self):
        quote = _service().calculate_quote(100.0, "fixed", 10, 3)
        assert quote.base_price == 100.0
        assert quote.quantity == 3
        assert quote.final_price == pytest.approx(270.0)
        assert quote.rule_applied == "fixed"
        assert quote.clamped is False


class TestInputValidation:
    def test_negative_quantity_rejected_before_rule_runs(self):
        rule = RecordingRule()
        service = _service()
        with pytest.raises(InvalidInputError, match="Quantity"):
            service.calculate_price(10.0, quantity=-1, rule=rule)
        assert rule.seen is None

    def test_negative_base_price_rejected(self):
        with pytest.raises(InvalidInputError, match="Base price"):
            _service().calculate_price(-1.0, "percentage", 10)

    def test_non_integer_quantity_rejected(self):
        with pytest.raises(InvalidInputError, match="integer"):
            _service().calculate_price(10.0, "percentage", 10, 1.5)

    def test_unknown_type_propagates(self):
        with pytest.raises(UnknownTypeError):
            _service().calculate_price(10.0, "clearance", 10)

    def test_no_rule_available(self):
        with pytest.raises(InvalidInputError, match="no active rule"):
            _service().calculate_price(10.0)

    def test_rule_errors_propagate_unchanged(self):
        with pytest.raises(InvalidInputError, match="between 0 and 100"):
            _service().calculate_price(100.0, "percentage", 120)


class TestClamping:
    def test_negative_rule_output_is_clamped(self):
        service = _service()
        quote = service.calculate_quote(10.0, quantity=2, rule=NegativeRule())
        assert quote.final_price == 0.0
        assert quote.clamped is True

    def test_clamping_logs_warning_not_error(self):
        service = _service()
        service.calculate_price(10.0, rule=NegativeRule())
        assert _operations(service) == ["price_attempt", "price_clamped", "price_result"]
        warning = service.audit.last("price_clamped")
        assert warning.level == AuditLevel.WARNING
        assert warning.context["raw_price"] == -50.0


class TestRuleSelection:
    def test_active_rule_used_without_discount_type(self):
        service = _service()
        service.set_active_rule(FixedDiscountRule())
        assert service.calculate_price(100.0, None, 25, 2) == pytest.approx(150.0)

    def test_strategy_switching(self):
        service = _service()
        service.set_active_rule(PercentageDiscountRule())
        first = service.calculate_price(100.0, discount_value=10)
        service.set_active_rule(FixedDiscountRule())
        second = service.calculate_price(100.0, discount_value=10)
        assert first == pytest.approx(90.0)
        assert second == pytest.approx(90.0)
        assert service.audit.get_trail("price_result")[0].context["rule"] == "percentage"
        assert service.audit.get_trail("price_result")[1].context["rule"] == "fixed"

    def test_discount_type_wins_over_active_rule(self):
        service = _service()
        service.set_active_rule(NegativeRule())
        assert service.calculate_price(100.0, "percentage", 50) == pytest.approx(50.0)

    def test_per_call_rule_wins_over_everything(self):
        service = _service()
        service.set_active_rule(PercentageDiscountRule())
        quote = service.calculate_quote(10.0, "fixed", 1, rule=NegativeRule())
        assert quote.rule_applied == "negative"

    def test_discount_value_routed_to_value_key(self):
        rule = RecordingRule()
        _service().calculate_price(10.0, discount_value=3, rule=rule, params={"extra": 1})
        assert rule.seen == {"amount": 3, "discount_value": 3, "extra": 1}

    def test_rules_receive_read_only_params(self):
        class MutatingRule(PricingRule):
            discount_type = "mutating"

            def apply(self, base_price, quantity, params):
                params["sneaky"] = True
                return base_price

        with pytest.raises(TypeError):
            _service().calculate_price(10.0, rule=MutatingRule())


class TestAuditTrail:
    def test_success_trail(self):
        service = _service()
        service.calculate_price(100.0, "percentage", 20, 2, {"note": "x"})
        entries = service.audit.get_all()
        assert [e.operation for e in entries] == ["price_attempt", "price_result"]
        assert entries[0].context["discount_type"] == "percentage"
        assert entries[0].context["parameters"] == {"note": "x"}
        assert entries[1].context["final_price"] == pytest.approx(160.0)

    def test_error_trail(self):
        service = _service()
        with pytest.raises(InvalidInputError):
            service.calculate_price(100.0, "fixed", -5)
        assert _operations(service) == ["price_attempt", "price_error"]
        error = service.audit.last()
        assert error.level == AuditLevel.ERROR
        assert error.context["error_type"] == "InvalidInputError"


class TestCalculationStats:
    def test_empty_stats(self):
        stats = _service().get_calculation_stats()
        assert stats.total_calculations == 0
        assert stats.last_calculation_timestamp is None
        assert "seasonal" in stats.supported_discount_types

    def test_stats_derived_from_audit_log(self):
        service = _service()
        service.calculate_price(100.0, "percentage", 10)
        service.calculate_price(100.0, "fixed", 10)
        with pytest.raises(InvalidInputError):
            service.calculate_price(100.0, "fixed", -10)

        stats = service.get_calculation_stats()
        assert stats.total_calculations == 2
        assert stats.last_calculation_timestamp == service.audit.last("price_result").timestamp

    def test_custom_types_reported(self):
        service = _service()
        service.registry.register("negative", NegativeRule)
        assert service.get_calculation_stats().supported_discount_types[-1] == "negative"


class TestQuotePersistence:
    def test_quotes_saved(self):
        repository = QuoteRepository()
        service = _service(repository)
        service.calculate_price(100.0, "percentage", 10)
        service.calculate_price(10.0, rule=NegativeRule())
        assert repository.count() == 2
        assert repository.get_quote(2).clamped is True

    def test_repository_failure_audited_and_reraised(self):
        service = _service(BrokenRepository())
        with pytest.raises(DatabaseFailureError, match="read-only"):
            service.calculate_price(100.0, "percentage", 10)
        assert _operations(service) == ["price_attempt", "price_error"]
        assert service.get_calculation_stats().total_calculations == 0
