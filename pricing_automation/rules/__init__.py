"""Pricing rules — strategies, defaults and the rule registry."""

from pricing_automation.rules.base import PricingRule
from pricing_automation.rules.discount_rules import (
    BulkDiscountRule,
    FixedDiscountRule,
    PercentageDiscountRule,
    SeasonalDiscountRule,
    TieredDiscountRule,
    VolumeDiscountRule,
)
from pricing_automation.rules.registry import RuleRegistry, default_rule_registry
from pricing_automation.rules.rules_config import DEFAULT_DISCOUNTS, DiscountDefaults

__all__ = [
    "PricingRule",
    "PercentageDiscountRule",
    "FixedDiscountRule",
    "TieredDiscountRule",
    "VolumeDiscountRule",
    "BulkDiscountRule",
    "SeasonalDiscountRule",
    "RuleRegistry",
    "default_rule_registry",
    "DiscountDefaults",
    "DEFAULT_DISCOUNTS",
]
