"""
Data schemas produced and consumed by the pricing and notification services.
Each schema is a clearly-bounded value object; none of them is mutated after
creation.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, Field

from .enums import AuditLevel


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ── Pricing ──────────────────────────────────────────────


class DiscountTier(BaseModel):
    """One (threshold, rate) pair of a volume or bulk table."""
    model_config = {"frozen": True}

    threshold: int = Field(ge=0)
    rate: float = Field(ge=0.0, le=1.0)


class PriceQuote(BaseModel):
    """Outcome of one engine calculation."""
    model_config = {"frozen": True}

    base_price: float = Field(ge=0.0)
    quantity: int = Field(ge=0)
    final_price: float = Field(ge=0.0)
    rule_applied: str
    clamped: bool = False
    calculated_at: datetime = Field(default_factory=_utcnow)


class CalculationStats(BaseModel):
    total_calculations: int = 0
    supported_discount_types: list[str] = []
    last_calculation_timestamp: Optional[datetime] = None


# ── Audit ────────────────────────────────────────────────


class AuditEntry(BaseModel):
    model_config = {"frozen": True}

    timestamp: datetime = Field(default_factory=_utcnow)
    level: AuditLevel = AuditLevel.INFO
    operation: str
    context: dict[str, Any] = {}
    sequence: int = 0


# ── Notifications ────────────────────────────────────────


class NotificationResult(BaseModel):
    channel: str
    recipient: str
    success: bool
    error: Optional[str] = None


class ChannelStats(BaseModel):
    sent: int = 0
    succeeded: int = 0


class NotificationStats(BaseModel):
    total_sent: int = 0
    total_succeeded: int = 0
    total_errors: int = 0
    success_rate: float = 0.0
    channels: dict[str, ChannelStats] = {}
