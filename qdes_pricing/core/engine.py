"""QDES pricing engine: quadratic decay, exponential surge."""

import threading
from dataclasses import dataclass, field
from typing import Hashable, Optional

from qdes_pricing.core.clock import SystemClock
from qdes_pricing.core.config import MAX_PRICE, MAX_TIMESTAMP, PricingConfig
from qdes_pricing.core.curve import decayed_price, required_payment, surged_price
from qdes_pricing.core.errors import (
    InsufficientPayment,
    NotStarted,
    PriceOverflow,
    RefundFailed,
    TimestampOverflow,
    ZeroQuantity,
)
from qdes_pricing.core.interfaces import Clock, ValueTransfer
from qdes_pricing.core.state import NOT_STARTED, PriceState, PurchaseReceipt


@dataclass
class PricingEngine:
    """Adaptive unit price for a single stream of identical items.

    The engine tracks one scalar price over time:
    - Idle time eases the price down to config.bottom_price along a
      concave quadratic curve, reaching it exactly after config.decay_time.
    - Each unit bought multiplies the stored price by the growth ratio.
    - A batch of N units is charged N times the pre-surge price.

    start(), purchase() and update_config() are serialized on one lock.
    current_price() reads the immutable state reference without locking.
    """
    config: PricingConfig
    clock: Clock = field(default_factory=SystemClock)
    transfer: Optional[ValueTransfer] = None
    name: str = ""
    _state: PriceState = field(default=NOT_STARTED, init=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.name:
            self.name = self.__class__.__name__

    @property
    def state(self) -> PriceState:
        """Snapshot of the stored (price, timestamp) pair."""
        return self._state

    @property
    def last_price(self) -> int:
        return self._state.last_price

    @property
    def last_timestamp(self) -> int:
        return self._state.last_timestamp

    @property
    def is_started(self) -> bool:
        return self._state.is_started

    def start(self) -> None:
        """Seed the curve at config.starting_price as of now.

        Calling it again re-seeds; callers wanting start-once semantics
        must enforce them themselves.

        Raises:
            TimestampOverflow: the clock reads past the 64-bit timestamp domain
        """
        with self._lock:
            now = _checked_timestamp(self.clock.now())
            self._state = PriceState(self.config.starting_price, now)

    def update_config(self, config: PricingConfig) -> None:
        """Replace the curve parameters for subsequent calls."""
        with self._lock:
            self.config = config

    def current_price(self) -> int:
        """Price per unit right now, before any scale ratio.

        Returns 0 if the engine was never started.
        """
        state = self._state
        if not state.is_started:
            return 0
        return self._price_at(state, self.config, self.clock.now())

    @staticmethod
    def _price_at(state: PriceState, config: PricingConfig, now: int) -> int:
        return decayed_price(
            state.last_price,
            state.last_timestamp,
            now,
            config.decay_time,
            config.bottom_price,
        )

    def quote(self, quantity: int, *, scale_numerator: int = 1, scale_denominator: int = 1) -> int:
        """Payment a purchase of quantity units would require right now."""
        _validate_order(quantity, scale_numerator, scale_denominator)
        return required_payment(self.current_price(), quantity, scale_numerator, scale_denominator)

    def purchase(
        self,
        quantity: int,
        payment: int,
        *,
        payer: Optional[Hashable] = None,
        scale_numerator: int = 1,
        scale_denominator: int = 1,
    ) -> PurchaseReceipt:
        """Settle a purchase of quantity units and surge the price.

        Args:
            quantity: Units bought, all charged the same unit price
            payment: Amount tendered by the payer
            payer: Identity handed to the transfer capability for refunds
            scale_numerator: Numerator of a multiplier on the unit price
            scale_denominator: Denominator of that multiplier

        Returns:
            PurchaseReceipt describing the settlement

        Raises:
            NotStarted: start() was never called
            ZeroQuantity: quantity is 0
            InsufficientPayment: payment is below the required amount
            PriceOverflow: the surged price cannot be stored
            TimestampOverflow: the clock reads past the 64-bit timestamp domain
            RefundFailed: excess payment could not be returned
        """
        with self._lock:
            state = self._state
            if not state.is_started:
                raise NotStarted()
            _validate_order(quantity, scale_numerator, scale_denominator)
            if payment < 0:
                raise ValueError(f"payment must be >= 0, got {payment}")

            config = self.config
            now = self.clock.now()
            price = self._price_at(state, config, now)
            scaled_price = price * scale_numerator // scale_denominator
            required = required_payment(price, quantity, scale_numerator, scale_denominator)
            if payment < required:
                raise InsufficientPayment(required, payment)

            new_price = surged_price(
                price, quantity, config.growth_numerator, config.growth_denominator
            )
            if new_price > MAX_PRICE:
                raise PriceOverflow(new_price, MAX_PRICE)
            new_state = PriceState(new_price, _checked_timestamp(now))

            # Value moves only after every check has passed
            excess = payment - required
            if excess > 0:
                self._refund(payer, excess)

            self._state = new_state

        return PurchaseReceipt(
            quantity=quantity,
            unit_price=price,
            scaled_unit_price=scaled_price,
            required_payment=required,
            tendered=payment,
            refunded=excess,
            new_price=new_price,
            timestamp=now,
            payer=payer,
        )

    def _refund(self, payer: Optional[Hashable], amount: int) -> None:
        """Return excess payment; any failure aborts the purchase."""
        if self.transfer is None:
            raise RefundFailed(payer, amount, "no transfer capability configured")
        try:
            ok = self.transfer.transfer(payer, amount)
        except Exception as e:
            raise RefundFailed(payer, amount, str(e)) from e
        if not ok:
            raise RefundFailed(payer, amount, "transfer rejected")


def _checked_timestamp(now: int) -> int:
    if now > MAX_TIMESTAMP:
        raise TimestampOverflow(now, MAX_TIMESTAMP)
    return now


def _validate_order(quantity: int, scale_numerator: int, scale_denominator: int) -> None:
    if quantity == 0:
        raise ZeroQuantity()
    if quantity < 0:
        raise ValueError(f"quantity must be > 0, got {quantity}")
    if scale_numerator < 0:
        raise ValueError(f"scale_numerator must be >= 0, got {scale_numerator}")
    if scale_denominator <= 0:
        raise ValueError(f"scale_denominator must be > 0, got {scale_denominator}")
