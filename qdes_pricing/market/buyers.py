"""Bursty buyer flow with Poisson arrivals."""

from dataclasses import dataclass
from typing import Optional

import numpy as np


@dataclass
class BuyOrder:
    """A buyer's intent for one time step."""
    buyer: str
    quantity: int
    max_unit_price: int   # Reservation price per unit, in wei
    overpay_fraction: float  # Extra tendered on top of the quote
    accepts_refunds: bool = True


class BuyerFlow:
    """Generates demand that alternates between calm and burst regimes.

    Each step is a burst with probability burst_prob. Arrivals follow a
    Poisson distribution at calm_rate or burst_rate. Order quantities are
    geometric with the given mean, reservation prices lognormal around
    reference_price, and a fraction of buyers overpay so that refunds are
    exercised. Some buyers may be unable to receive refunds at all.
    """

    def __init__(
        self,
        reference_price: int,
        calm_rate: float = 0.2,
        burst_rate: float = 4.0,
        burst_prob: float = 0.05,
        mean_quantity: float = 2.0,
        price_sigma: float = 0.5,
        overpay_prob: float = 0.3,
        max_overpay: float = 0.1,
        refund_reject_prob: float = 0.0,
        seed: Optional[int] = None,
    ):
        """
        Args:
            reference_price: Median reservation price per unit (wei)
            calm_rate: Expected arrivals per step outside bursts
            burst_rate: Expected arrivals per step during a burst
            burst_prob: Probability a step is a burst
            mean_quantity: Mean units per order (>= 1)
            price_sigma: Lognormal sigma of reservation prices
            overpay_prob: Probability a buyer tenders more than the quote
            max_overpay: Largest overpayment as a fraction of the quote
            refund_reject_prob: Probability a buyer cannot receive refunds
            seed: Random seed for reproducibility
        """
        if reference_price <= 0:
            raise ValueError(f"reference_price must be > 0, got {reference_price}")
        if mean_quantity < 1:
            raise ValueError(f"mean_quantity must be >= 1, got {mean_quantity}")
        self.reference_price = reference_price
        self.calm_rate = calm_rate
        self.burst_rate = burst_rate
        self.burst_prob = burst_prob
        self.mean_quantity = mean_quantity
        self.price_sigma = price_sigma
        self.overpay_prob = overpay_prob
        self.max_overpay = max_overpay
        self.refund_reject_prob = refund_reject_prob
        self._rng = np.random.default_rng(seed)
        self._next_id = 0

    def reset(self, seed: Optional[int] = None) -> None:
        """Reset the random state."""
        if seed is not None:
            self._rng = np.random.default_rng(seed)
        self._next_id = 0

    def generate_orders(self) -> list[BuyOrder]:
        """Generate buy orders for one time step.

        Returns:
            List of orders (may be empty if no arrivals)
        """
        bursting = self._rng.random() < self.burst_prob
        rate = self.burst_rate if bursting else self.calm_rate
        n_arrivals = self._rng.poisson(rate)

        if n_arrivals == 0:
            return []

        orders = []
        sigma = max(self.price_sigma, 0.01)
        for _ in range(n_arrivals):
            quantity = int(self._rng.geometric(1.0 / self.mean_quantity))
            # Median of the lognormal is reference_price
            multiplier = float(self._rng.lognormal(0.0, sigma))
            max_unit_price = int(self.reference_price * multiplier)

            if self._rng.random() < self.overpay_prob:
                overpay = float(self._rng.uniform(0.0, self.max_overpay))
            else:
                overpay = 0.0

            orders.append(
                BuyOrder(
                    buyer=f"buyer-{self._next_id}",
                    quantity=quantity,
                    max_unit_price=max_unit_price,
                    overpay_fraction=overpay,
                    accepts_refunds=bool(self._rng.random() >= self.refund_reject_prob),
                )
            )
            self._next_id += 1

        return orders
