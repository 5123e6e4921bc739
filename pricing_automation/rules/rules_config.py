"""
Discount defaults — tier and seasonal tables used when a call does not
supply its own.

These are code-level defaults, not environment configuration: callers pass
real tables as call parameters.
"""

from __future__ import annotations

from pydantic import BaseModel


class DiscountDefaults(BaseModel):
    """Fallback tables for the tiered and seasonal rules."""
    # threshold → rate, highest threshold first
    volume_thresholds: dict[int, float] = {
        100: 0.15,
        50: 0.10,
        20: 0.05,
    }
    bulk_thresholds: dict[int, float] = {
        10: 0.20,
        5: 0.10,
    }
    # month (1-12) → rate
    seasonal_discounts: dict[int, float] = {
        12: 0.25,  # Christmas
        1: 0.20,   # January sales
        7: 0.15,   # summer
        8: 0.15,
    }


DEFAULT_DISCOUNTS = DiscountDefaults()
