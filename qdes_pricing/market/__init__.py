"""Market simulation components."""

from qdes_pricing.market.buyers import BuyerFlow, BuyOrder
from qdes_pricing.market.ledger import Ledger

__all__ = [
    "BuyerFlow",
    "BuyOrder",
    "Ledger",
]
