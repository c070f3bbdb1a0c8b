"""Quadratic Decay Exponential Surge (QDES) unit pricing."""

from qdes_pricing.core.config import PricingConfig
from qdes_pricing.core.engine import PricingEngine
from qdes_pricing.core.interfaces import Clock, ValueTransfer
from qdes_pricing.core.state import PriceState, PurchaseReceipt

__all__ = [
    "Clock",
    "PricingConfig",
    "PricingEngine",
    "PriceState",
    "PurchaseReceipt",
    "ValueTransfer",
]
