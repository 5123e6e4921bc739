"""
Base pricing rule that every discount strategy inherits.

Design:
  - `apply()` is a pure function of (base price, quantity, params).
  - Rules never mutate `params` and never clamp; clamping is the engine's job.
  - `value_key` names the parameter fed by the engine's `discount_value`
    argument, for rules that take a single scalar value.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional

from pricing_automation.exceptions import InvalidInputError


class PricingRule(ABC):
    """Abstract base for all discount strategies."""

    discount_type: str  # set in each subclass
    value_key: Optional[str] = None

    @abstractmethod
    def apply(self, base_price: float, quantity: int, params: Mapping[str, Any]) -> float:
        """Return the discounted total for *quantity* units at *base_price*."""
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}(discount_type={self.discount_type!r})"


# ── Parameter helpers (module-level) ─────────────────────

def require_number(params: Mapping[str, Any], key: str) -> float:
    """Fetch *key* from params as a float, rejecting missing or non-numeric values."""
    if key not in params or params[key] is None:
        raise InvalidInputError(f"Parameter '{key}' is required", field=key)
    value = params[key]
    if isinstance(value, bool):
        raise InvalidInputError(f"Parameter '{key}' must be a number", field=key, value=value)
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidInputError(
            f"Parameter '{key}' must be a number", field=key, value=value
        ) from None
    if not math.isfinite(number):
        raise InvalidInputError(f"Parameter '{key}' must be finite", field=key, value=value)
    return number
