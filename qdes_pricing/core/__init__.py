"""Core pricing components."""

from qdes_pricing.core.clock import ManualClock, SystemClock
from qdes_pricing.core.config import PricingConfig
from qdes_pricing.core.engine import PricingEngine
from qdes_pricing.core.errors import (
    InsufficientPayment,
    NotStarted,
    PriceOverflow,
    PricingError,
    RefundFailed,
    TimestampOverflow,
    ZeroQuantity,
)
from qdes_pricing.core.interfaces import Clock, ValueTransfer
from qdes_pricing.core.state import PriceState, PurchaseReceipt

__all__ = [
    "Clock",
    "ValueTransfer",
    "ManualClock",
    "SystemClock",
    "PricingConfig",
    "PricingEngine",
    "PriceState",
    "PurchaseReceipt",
    "PricingError",
    "NotStarted",
    "ZeroQuantity",
    "InsufficientPayment",
    "RefundFailed",
    "PriceOverflow",
    "TimestampOverflow",
]
