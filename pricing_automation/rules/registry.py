"""
Rule Registry — discount type → pricing rule factory.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional

from pricing_automation.exceptions import UnknownTypeError
from pricing_automation.rules.base import PricingRule
from pricing_automation.rules.discount_rules import (
    BulkDiscountRule,
    FixedDiscountRule,
    PercentageDiscountRule,
    SeasonalDiscountRule,
    VolumeDiscountRule,
)
from pricing_automation.rules.rules_config import DEFAULT_DISCOUNTS, DiscountDefaults
from pricing_automation.utils.registry import Registry

logger = logging.getLogger(__name__)


class RuleRegistry(Registry[PricingRule]):
    """Registry of pricing rules; unknown discount types raise UnknownTypeError."""

    kind = "discount type"

    def _miss(self, name: str) -> Exception:
        return UnknownTypeError(name)


def default_rule_registry(
    defaults: DiscountDefaults = DEFAULT_DISCOUNTS,
    clock: Optional[Callable[[], datetime]] = None,
) -> RuleRegistry:
    """Build a registry holding the five built-in discount types."""
    registry = RuleRegistry()
    registry.register(PercentageDiscountRule.discount_type, PercentageDiscountRule)
    registry.register(FixedDiscountRule.discount_type, FixedDiscountRule)
    registry.register(VolumeDiscountRule.discount_type, lambda: VolumeDiscountRule(defaults))
    registry.register(BulkDiscountRule.discount_type, lambda: BulkDiscountRule(defaults))
    registry.register(
        SeasonalDiscountRule.discount_type,
        lambda: SeasonalDiscountRule(defaults, clock=clock),
    )
    logger.debug(f"Default rule registry: {registry.registered_types()}")
    return registry
