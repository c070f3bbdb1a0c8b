"""Price state and settlement records."""

from dataclasses import dataclass
from typing import Hashable, Optional

from qdes_pricing.core.config import MAX_PRICE, MAX_TIMESTAMP


@dataclass(frozen=True)
class PriceState:
    """The single persistent record of a price stream.

    last_price is the per-unit price recorded at the most recent purchase
    (or the seeded starting price), last_timestamp the second it was
    recorded. The all-zero state means the engine was never started.
    """
    last_price: int = 0
    last_timestamp: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.last_price <= MAX_PRICE:
            raise ValueError(f"last_price must be in [0, {MAX_PRICE}], got {self.last_price}")
        if not 0 <= self.last_timestamp <= MAX_TIMESTAMP:
            raise ValueError(
                f"last_timestamp must be in [0, {MAX_TIMESTAMP}], got {self.last_timestamp}"
            )

    @property
    def is_started(self) -> bool:
        return self.last_price != 0 or self.last_timestamp != 0


NOT_STARTED = PriceState()


@dataclass(frozen=True)
class PurchaseReceipt:
    """Outcome of a settled purchase.

    Every unit in the batch is charged scaled_unit_price; the caller keeps
    required_payment and refunded went back to the payer.
    """
    quantity: int
    unit_price: int          # Curve price at the instant of purchase
    scaled_unit_price: int   # unit_price after the scale ratio
    required_payment: int
    tendered: int
    refunded: int
    new_price: int           # Stored price after the surge
    timestamp: int
    payer: Optional[Hashable] = None

    @property
    def surge(self) -> int:
        """How far this purchase moved the stored price."""
        return self.new_price - self.unit_price
