"""
Discount Rules — the built-in pricing strategies.

Every rule returns the discounted total for an order line. Negative totals
are possible in principle (custom rules) and are clamped by the engine.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Iterable, Mapping, Optional

from pydantic import ValidationError

from pricing_automation.exceptions import InvalidInputError
from pricing_automation.models.enums import DiscountType
from pricing_automation.models.schemas import DiscountTier
from pricing_automation.rules.base import PricingRule, require_number
from pricing_automation.rules.rules_config import DEFAULT_DISCOUNTS, DiscountDefaults

logger = logging.getLogger(__name__)


class PercentageDiscountRule(PricingRule):
    """A percentage off the unit price."""

    discount_type = DiscountType.PERCENTAGE.value
    value_key = "discount_percent"

    def apply(self, base_price: float, quantity: int, params: Mapping[str, Any]) -> float:
        percent = require_number(params, self.value_key)
        if percent < 0 or percent > 100:
            raise InvalidInputError(
                "Discount percent must be between 0 and 100",
                field=self.value_key,
                value=percent,
            )
        return base_price * (1 - percent / 100) * quantity


class FixedDiscountRule(PricingRule):
    """A fixed amount off the unit price; the unit price never drops below zero."""

    discount_type = DiscountType.FIXED.value
    value_key = "discount_amount"

    def apply(self, base_price: float, quantity: int, params: Mapping[str, Any]) -> float:
        amount = require_number(params, self.value_key)
        if amount < 0:
            raise InvalidInputError(
                "Discount amount cannot be negative",
                field=self.value_key,
                value=amount,
            )
        return max(0.0, base_price - amount) * quantity


# ── Tiered rules ─────────────────────────────────────────


class TieredDiscountRule(PricingRule):
    """
    Quantity-tiered discount.

    Tiers are scanned in declaration order and the FIRST tier whose threshold
    is <= quantity wins, so tables are expected highest-threshold first.
    Rates never stack across tiers. Below every threshold the rate is 0.

    Tiers come from `params["thresholds"]`, else from the rule-specific key
    (`defaults_key`), else from DiscountDefaults.
    """

    defaults_key: str  # set in each subclass

    def __init__(self, defaults: DiscountDefaults = DEFAULT_DISCOUNTS):
        self._defaults = defaults

    def apply(self, base_price: float, quantity: int, params: Mapping[str, Any]) -> float:
        tiers = self.tiers_for(params)
        rate = select_tier_rate(tiers, quantity)
        logger.debug(f"[{self.discount_type}] quantity={quantity} → rate={rate}")
        return base_price * (1 - rate) * quantity

    def tiers_for(self, params: Mapping[str, Any]) -> list[DiscountTier]:
        raw = params.get("thresholds")
        if raw is None:
            raw = params.get(self.defaults_key)
        if raw is None:
            raw = getattr(self._defaults, self.defaults_key)
        return parse_tiers(raw, field=self.defaults_key)


class VolumeDiscountRule(TieredDiscountRule):
    discount_type = DiscountType.VOLUME.value
    defaults_key = "volume_thresholds"


class BulkDiscountRule(TieredDiscountRule):
    discount_type = DiscountType.BULK.value
    defaults_key = "bulk_thresholds"


def parse_tiers(raw: Any, field: str = "thresholds") -> list[DiscountTier]:
    """
    Accept either a mapping {threshold: rate} or a sequence of
    (threshold, rate) pairs, preserving declaration order.
    """
    if isinstance(raw, Mapping):
        pairs: Iterable[Any] = list(raw.items())
    elif isinstance(raw, (list, tuple)):
        pairs = raw
    else:
        raise InvalidInputError(
            f"'{field}' must be a list of (threshold, rate) pairs or a mapping",
            field=field,
            value=raw,
        )

    tiers: list[DiscountTier] = []
    for pair in pairs:
        if isinstance(pair, Mapping):
            candidate = dict(pair)
        elif isinstance(pair, (list, tuple)) and len(pair) == 2:
            candidate = {"threshold": pair[0], "rate": pair[1]}
        else:
            raise InvalidInputError(
                f"Invalid tier in '{field}': {pair!r}", field=field, value=pair
            )
        try:
            tiers.append(DiscountTier(**candidate))
        except (ValidationError, TypeError) as exc:
            raise InvalidInputError(
                f"Invalid tier in '{field}': {pair!r} ({exc})", field=field, value=pair
            ) from None
    return tiers


def select_tier_rate(tiers: list[DiscountTier], quantity: int) -> float:
    for tier in tiers:
        if quantity >= tier.threshold:
            return tier.rate
    return 0.0


# ── Seasonal rule ────────────────────────────────────────


class SeasonalDiscountRule(PricingRule):
    """
    Month-keyed discount.

    Applies to the base price only: the quantity is NOT multiplied in, unlike
    every other rule. Kept as-is; callers wanting a per-unit seasonal discount
    should register a custom rule.
    """

    discount_type = DiscountType.SEASONAL.value

    def __init__(
        self,
        defaults: DiscountDefaults = DEFAULT_DISCOUNTS,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._defaults = defaults
        self._clock = clock or datetime.now

    def apply(self, base_price: float, quantity: int, params: Mapping[str, Any]) -> float:
        month = self.month_for(params)
        rates = self.rates_for(params)
        rate = rates.get(month, 0.0)
        logger.debug(f"[seasonal] month={month} → rate={rate}")
        return base_price * (1 - rate)

    def month_for(self, params: Mapping[str, Any]) -> int:
        raw = params.get("month")
        if raw is None:
            raw = params.get("current_month")
        if raw is None:
            return self._clock().month

        if isinstance(raw, bool) or not isinstance(raw, (int, str)):
            raise InvalidInputError("Month must be an integer between 1 and 12", field="month", value=raw)
        try:
            month = int(raw)
        except ValueError:
            raise InvalidInputError(
                "Month must be an integer between 1 and 12", field="month", value=raw
            ) from None
        if not 1 <= month <= 12:
            raise InvalidInputError("Month must be an integer between 1 and 12", field="month", value=raw)
        return month

    def rates_for(self, params: Mapping[str, Any]) -> dict[int, float]:
        raw = params.get("seasonal_discounts")
        if raw is None:
            return dict(self._defaults.seasonal_discounts)
        if not isinstance(raw, Mapping):
            raise InvalidInputError(
                "'seasonal_discounts' must be a mapping of month → rate",
                field="seasonal_discounts",
                value=raw,
            )

        rates: dict[int, float] = {}
        for month, rate in raw.items():
            try:
                month_num, rate_val = int(month), float(rate)
            except (TypeError, ValueError):
                raise InvalidInputError(
                    f"Invalid seasonal entry {month!r}: {rate!r}",
                    field="seasonal_discounts",
                    value=raw,
                ) from None
            if isinstance(month, bool) or not 1 <= month_num <= 12:
                raise InvalidInputError(
                    "Month must be an integer between 1 and 12",
                    field="seasonal_discounts",
                    value=month,
                )
            if not 0.0 <= rate_val <= 1.0:
                raise InvalidInputError(
                    f"Seasonal rate for month {month_num} must be between 0 and 1",
                    field="seasonal_discounts",
                    value=rate,
                )
            rates[month_num] = rate_val
        return rates
