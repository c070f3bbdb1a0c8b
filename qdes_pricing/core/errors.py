"""Errors raised by the pricing engine.

Every error aborts the whole call: no state is mutated and no value
has moved when one of these reaches the caller.
"""

from typing import Hashable, Optional


class PricingError(RuntimeError):
    """Base class for all pricing engine failures."""


class NotStarted(PricingError):
    """Raised when a purchase is attempted before start()."""

    def __init__(self) -> None:
        super().__init__("Pricing engine not started. Call start() first.")


class ZeroQuantity(PricingError, ValueError):
    """Raised when a purchase or quote asks for zero units."""

    def __init__(self) -> None:
        super().__init__("quantity must be > 0, got 0")


class InsufficientPayment(PricingError):
    """Raised when the tendered amount does not cover the required payment."""

    def __init__(self, required: int, tendered: int) -> None:
        self.required = required
        self.tendered = tendered
        super().__init__(
            f"Insufficient payment: required {required}, tendered {tendered}"
        )


class RefundFailed(PricingError):
    """Raised when returning excess payment to the payer did not succeed."""

    def __init__(self, recipient: Optional[Hashable], amount: int, reason: str = "") -> None:
        self.recipient = recipient
        self.amount = amount
        message = f"Refund of {amount} to {recipient!r} failed"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class PriceOverflow(PricingError):
    """Raised when a surge would push the stored price out of its 160-bit domain."""

    def __init__(self, price: int, limit: int) -> None:
        self.price = price
        self.limit = limit
        super().__init__(f"Surged price {price} exceeds maximum storable price {limit}")


class TimestampOverflow(PricingError):
    """Raised when the clock reads past the 64-bit timestamp domain."""

    def __init__(self, timestamp: int, limit: int) -> None:
        self.timestamp = timestamp
        self.limit = limit
        super().__init__(f"Timestamp {timestamp} exceeds maximum storable timestamp {limit}")
