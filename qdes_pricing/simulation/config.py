"""Shared configuration for baseline sale simulations and variance."""

from dataclasses import dataclass
import multiprocessing
import os
from typing import Optional

from qdes_pricing.core.config import PricingConfig, to_wei
from qdes_pricing.simulation.runner import DemandVariance, SaleConfig


@dataclass(frozen=True)
class BaselineSaleSettings:
    n_simulations: int
    n_steps: int
    step_seconds: int
    starting_price: float   # ether
    bottom_price: float     # ether
    decay_time: int
    growth_numerator: int
    growth_denominator: int
    reference_price: float  # ether
    calm_rate: float
    burst_rate: float
    burst_prob: float
    mean_quantity: float
    price_sigma: float
    overpay_prob: float
    max_overpay: float
    refund_reject_prob: float


BASELINE_SETTINGS = BaselineSaleSettings(
    n_simulations=20,
    n_steps=1440,
    step_seconds=60,
    starting_price=0.1,
    bottom_price=0.01,
    decay_time=86400,
    growth_numerator=101,
    growth_denominator=100,
    reference_price=0.08,
    calm_rate=0.2,
    burst_rate=4.0,
    burst_prob=0.05,
    mean_quantity=2.0,
    price_sigma=0.5,
    overpay_prob=0.3,
    max_overpay=0.1,
    refund_reject_prob=0.01,
)


BASELINE_VARIANCE = DemandVariance(
    burst_prob_min=0.02,
    burst_prob_max=0.08,
    vary_burst_prob=True,
    calm_rate_min=0.1,
    calm_rate_max=0.3,
    vary_calm_rate=True,
    reference_price_scale_min=0.8,
    reference_price_scale_max=1.2,
    vary_reference_price=True,
)


def _midpoint(min_val: float, max_val: float) -> float:
    return (min_val + max_val) / 2


def baseline_nominal_burst_prob() -> float:
    return _midpoint(BASELINE_VARIANCE.burst_prob_min, BASELINE_VARIANCE.burst_prob_max)


def baseline_nominal_calm_rate() -> float:
    return _midpoint(BASELINE_VARIANCE.calm_rate_min, BASELINE_VARIANCE.calm_rate_max)


def resolve_n_workers() -> int:
    """Resolve worker count from environment or CPU count."""
    return int(os.environ.get("N_WORKERS", str(min(8, multiprocessing.cpu_count()))))


def build_pricing_config(
    *,
    starting_price: Optional[float] = None,
    bottom_price: Optional[float] = None,
    decay_time: Optional[int] = None,
    growth_numerator: Optional[int] = None,
    growth_denominator: Optional[int] = None,
) -> PricingConfig:
    """Build a PricingConfig, falling back to baseline values (prices in ether)."""
    s = BASELINE_SETTINGS
    return PricingConfig.from_ether(
        starting_price=s.starting_price if starting_price is None else starting_price,
        bottom_price=s.bottom_price if bottom_price is None else bottom_price,
        decay_time=s.decay_time if decay_time is None else decay_time,
        growth_numerator=s.growth_numerator if growth_numerator is None else growth_numerator,
        growth_denominator=(
            s.growth_denominator if growth_denominator is None else growth_denominator
        ),
    )


def build_sale_config(
    *,
    seed: Optional[int],
    n_steps: Optional[int] = None,
    step_seconds: Optional[int] = None,
    reference_price: Optional[float] = None,
    calm_rate: Optional[float] = None,
    burst_rate: Optional[float] = None,
    burst_prob: Optional[float] = None,
    mean_quantity: Optional[float] = None,
    scale_numerator: int = 1,
    scale_denominator: int = 1,
) -> SaleConfig:
    """Build a SaleConfig with explicit fields, defaulting to the baseline."""
    s = BASELINE_SETTINGS
    return SaleConfig(
        n_steps=s.n_steps if n_steps is None else n_steps,
        step_seconds=s.step_seconds if step_seconds is None else step_seconds,
        reference_price=to_wei(s.reference_price if reference_price is None else reference_price),
        calm_rate=baseline_nominal_calm_rate() if calm_rate is None else calm_rate,
        burst_rate=s.burst_rate if burst_rate is None else burst_rate,
        burst_prob=baseline_nominal_burst_prob() if burst_prob is None else burst_prob,
        mean_quantity=s.mean_quantity if mean_quantity is None else mean_quantity,
        price_sigma=s.price_sigma,
        overpay_prob=s.overpay_prob,
        max_overpay=s.max_overpay,
        refund_reject_prob=s.refund_reject_prob,
        scale_numerator=scale_numerator,
        scale_denominator=scale_denominator,
        seed=seed,
    )
