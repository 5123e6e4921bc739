from .enums import AuditLevel, DiscountType, NotificationChannel
from .schemas import (
    AuditEntry,
    CalculationStats,
    ChannelStats,
    DiscountTier,
    NotificationResult,
    NotificationStats,
    PriceQuote,
)

__all__ = [
    "AuditLevel",
    "DiscountType",
    "NotificationChannel",
    "AuditEntry",
    "CalculationStats",
    "ChannelStats",
    "DiscountTier",
    "NotificationResult",
    "NotificationStats",
    "PriceQuote",
]
