"""
Pricing Service — the pricing engine.

Selects a pricing rule, applies it, clamps the result to >= 0 and audits
every step:

    price_attempt → [price_clamped] → price_result     (success)
    price_attempt → price_error                        (any failure, re-raised)

Rule selection per call, first match wins:
  1. an explicit `rule=` argument,
  2. `discount_type` resolved through the rule registry,
  3. the active rule set with set_active_rule().

Passing the rule per call is race-free. The active rule is shared state:
swaps are last-write-wins and a swap concurrent with a calculation may or may
not be seen by it.
"""

from __future__ import annotations

import logging
import math
import threading
from types import MappingProxyType
from typing import Any, Mapping, Optional

from pricing_automation.exceptions import InvalidInputError
from pricing_automation.models.schemas import CalculationStats, PriceQuote
from pricing_automation.persistence.quote_repository import QuoteRepository
from pricing_automation.rules.base import PricingRule
from pricing_automation.rules.registry import RuleRegistry
from pricing_automation.services.audit_service import AuditService
from pricing_automation.utils.registry import normalize_key

logger = logging.getLogger(__name__)

OP_ATTEMPT = "price_attempt"
OP_CLAMPED = "price_clamped"
OP_RESULT = "price_result"
OP_ERROR = "price_error"


class PricingService:
    """Calculates discounted prices through pluggable rules."""

    def __init__(
        self,
        registry: RuleRegistry,
        audit: AuditService,
        repository: Optional[QuoteRepository] = None,
    ):
        self.registry = registry
        self.audit = audit
        self.repository = repository
        self._active_rule: Optional[PricingRule] = None
        self._lock = threading.Lock()

    # ── Active strategy ──────────────────────────────────

    def set_active_rule(self, rule: Optional[PricingRule]) -> None:
        """Swap the fallback rule used when a call names no discount type."""
        with self._lock:
            self._active_rule = rule
        logger.debug(f"Active rule set to {rule!r}")

    @property
    def active_rule(self) -> Optional[PricingRule]:
        with self._lock:
            return self._active_rule

    # ── Calculation ──────────────────────────────────────

    def calculate_price(
        self,
        base_price: float,
        discount_type: Any = None,
        discount_value: Optional[float] = None,
        quantity: int = 1,
        params: Optional[Mapping[str, Any]] = None,
        *,
        rule: Optional[PricingRule] = None,
    ) -> float:
        """Return the final (never negative) price."""
        quote = self.calculate_quote(
            base_price, discount_type, discount_value, quantity, params, rule=rule
        )
        return quote.final_price

    def calculate_quote(
        self,
        base_price: float,
        discount_type: Any = None,
        discount_value: Optional[float] = None,
        quantity: int = 1,
        params: Optional[Mapping[str, Any]] = None,
        *,
        rule: Optional[PricingRule] = None,
    ) -> PriceQuote:
        """Run one calculation and return the full quote."""
        raw_params = dict(params) if params else {}
        self.audit.info(OP_ATTEMPT, {
            "base_price": base_price,
            "discount_type": _type_label(discount_type),
            "discount_value": discount_value,
            "quantity": quantity,
            "parameters": raw_params,
        })

        try:
            _validate_inputs(base_price, quantity)
            selected = self._select_rule(discount_type, rule)
            rule_label = _rule_label(selected)
            call_params = _build_params(selected, discount_value, raw_params)

            raw_total = float(selected.apply(float(base_price), quantity, MappingProxyType(call_params)))

            final_price, clamped = raw_total, False
            if raw_total < 0:
                self.audit.warning(OP_CLAMPED, {
                    "rule": rule_label,
                    "raw_price": raw_total,
                    "final_price": 0.0,
                })
                final_price, clamped = 0.0, True

            quote = PriceQuote(
                base_price=float(base_price),
                quantity=quantity,
                final_price=final_price,
                rule_applied=rule_label,
                clamped=clamped,
            )

            if self.repository is not None:
                self.repository.save_quote(quote)

        except Exception as exc:
            self.audit.error(OP_ERROR, {
                "discount_type": _type_label(discount_type),
                "error_type": type(exc).__name__,
                "error": str(exc),
            })
            raise

        self.audit.info(OP_RESULT, {
            "rule": quote.rule_applied,
            "final_price": quote.final_price,
            "clamped": quote.clamped,
        })
        return quote

    # ── Statistics ───────────────────────────────────────

    def get_calculation_stats(self) -> CalculationStats:
        """Derived from the audit log and the registry; no separate counters."""
        results = self.audit.get_trail(OP_RESULT)
        return CalculationStats(
            total_calculations=len(results),
            supported_discount_types=self.registry.registered_types(),
            last_calculation_timestamp=results[-1].timestamp if results else None,
        )

    # ── Internals ────────────────────────────────────────

    def _select_rule(self, discount_type: Any, rule: Optional[PricingRule]) -> PricingRule:
        if rule is not None:
            return rule
        if discount_type is not None:
            return self.registry.resolve(discount_type)
        active = self.active_rule
        if active is None:
            raise InvalidInputError(
                "No discount type given and no active rule set", field="discount_type"
            )
        return active


# ── Helpers (module-level) ───────────────────────────────

def _validate_inputs(base_price: Any, quantity: Any) -> None:
    if isinstance(base_price, bool) or not isinstance(base_price, (int, float)):
        raise InvalidInputError("Base price must be a number", field="base_price", value=base_price)
    if not math.isfinite(base_price) or base_price < 0:
        raise InvalidInputError(
            "Base price must be a finite, non-negative number", field="base_price", value=base_price
        )
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise InvalidInputError("Quantity must be an integer", field="quantity", value=quantity)
    if quantity < 0:
        raise InvalidInputError("Quantity cannot be negative", field="quantity", value=quantity)


def _build_params(
    rule: PricingRule, discount_value: Optional[float], params: dict[str, Any]
) -> dict[str, Any]:
    """Copy params and place discount_value under the rule's value key."""
    call_params = dict(params)
    if discount_value is not None:
        value_key = getattr(rule, "value_key", None)
        if value_key:
            call_params[value_key] = discount_value
        call_params.setdefault("discount_value", discount_value)
    return call_params


def _rule_label(rule: PricingRule) -> str:
    return getattr(rule, "discount_type", None) or type(rule).__name__


def _type_label(discount_type: Any) -> Optional[str]:
    if discount_type is None:
        return None
    try:
        return normalize_key(discount_type)
    except InvalidInputError:
        return repr(discount_type)
