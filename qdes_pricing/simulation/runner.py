"""Sale simulation: drive a pricing engine with simulated buyer flow."""

from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Optional

import numpy as np

from qdes_pricing.core.clock import ManualClock
from qdes_pricing.core.config import PricingConfig, from_wei
from qdes_pricing.core.engine import PricingEngine
from qdes_pricing.core.errors import RefundFailed
from qdes_pricing.market.buyers import BuyerFlow
from qdes_pricing.market.ledger import Ledger


@dataclass(frozen=True)
class SaleConfig:
    """Demand and timing parameters for one simulated sale."""
    n_steps: int
    step_seconds: int
    reference_price: int
    calm_rate: float
    burst_rate: float
    burst_prob: float
    mean_quantity: float
    price_sigma: float
    overpay_prob: float
    max_overpay: float
    refund_reject_prob: float = 0.0
    scale_numerator: int = 1
    scale_denominator: int = 1
    start_time: int = 1_700_000_000
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        if self.n_steps <= 0:
            raise ValueError(f"n_steps must be > 0, got {self.n_steps}")
        if self.step_seconds <= 0:
            raise ValueError(f"step_seconds must be > 0, got {self.step_seconds}")
        if self.scale_denominator <= 0:
            raise ValueError(f"scale_denominator must be > 0, got {self.scale_denominator}")


@dataclass
class DemandVariance:
    """Configuration for demand variance across simulations."""
    burst_prob_min: float
    burst_prob_max: float
    vary_burst_prob: bool

    calm_rate_min: float
    calm_rate_max: float
    vary_calm_rate: bool

    reference_price_scale_min: float
    reference_price_scale_max: float
    vary_reference_price: bool


@dataclass
class StepResult:
    """What happened during one time step."""
    timestamp: int
    price: int        # Curve price at the end of the step
    units_sold: int
    revenue: int
    declined: int


@dataclass
class SaleResult:
    """Outcome of one simulated sale."""
    seed: Optional[int]
    starting_price: int
    final_price: int
    peak_price: int
    units_sold: int
    revenue: int
    refunded: int
    purchases: int
    declined_orders: int
    failed_refunds: int
    steps: list[StepResult] = field(default_factory=list)

    @property
    def average_unit_price(self) -> Decimal:
        """Mean retained payment per unit, in ether."""
        if self.units_sold == 0:
            return Decimal("0")
        return from_wei(self.revenue) / self.units_sold


@dataclass
class BatchResult:
    """Aggregate of many simulated sales."""
    n_simulations: int
    total_units: int
    total_revenue: int
    total_refunded: int
    total_declined: int
    total_failed_refunds: int
    peak_price: int
    sale_results: list[SaleResult] = field(default_factory=list)

    @property
    def mean_revenue(self) -> Decimal:
        """Mean revenue per sale, in ether."""
        if self.n_simulations == 0:
            return Decimal("0")
        return from_wei(self.total_revenue) / self.n_simulations

    @property
    def mean_units(self) -> Decimal:
        if self.n_simulations == 0:
            return Decimal("0")
        return Decimal(self.total_units) / self.n_simulations

    @property
    def average_unit_price(self) -> Decimal:
        """Revenue-weighted mean unit price across all sales, in ether."""
        if self.total_units == 0:
            return Decimal("0")
        return from_wei(self.total_revenue) / self.total_units


class SaleSimulator:
    """Runs one sale against a fresh engine on a manual clock."""

    def __init__(self, pricing: PricingConfig, sale: SaleConfig):
        self.pricing = pricing
        self.sale = sale

    def run(self, store_steps: bool = False) -> SaleResult:
        sale = self.sale
        clock = ManualClock(sale.start_time)
        ledger = Ledger()
        engine = PricingEngine(config=self.pricing, clock=clock, transfer=ledger)
        flow = BuyerFlow(
            reference_price=sale.reference_price,
            calm_rate=sale.calm_rate,
            burst_rate=sale.burst_rate,
            burst_prob=sale.burst_prob,
            mean_quantity=sale.mean_quantity,
            price_sigma=sale.price_sigma,
            overpay_prob=sale.overpay_prob,
            max_overpay=sale.max_overpay,
            refund_reject_prob=sale.refund_reject_prob,
            seed=sale.seed,
        )

        engine.start()
        peak_price = engine.last_price
        units_sold = revenue = purchases = declined = failed_refunds = 0
        steps = []

        for _ in range(sale.n_steps):
            timestamp = clock.advance(sale.step_seconds)
            step_units = step_revenue = step_declined = 0

            for order in flow.generate_orders():
                quote = engine.quote(
                    order.quantity,
                    scale_numerator=sale.scale_numerator,
                    scale_denominator=sale.scale_denominator,
                )
                if quote > order.max_unit_price * order.quantity:
                    step_declined += 1
                    continue
                if not order.accepts_refunds:
                    ledger.rejecting.add(order.buyer)

                payment = quote + int(quote * order.overpay_fraction)
                try:
                    receipt = engine.purchase(
                        order.quantity,
                        payment,
                        payer=order.buyer,
                        scale_numerator=sale.scale_numerator,
                        scale_denominator=sale.scale_denominator,
                    )
                except RefundFailed:
                    failed_refunds += 1
                    continue

                purchases += 1
                step_units += receipt.quantity
                step_revenue += receipt.required_payment
                peak_price = max(peak_price, receipt.new_price)

            units_sold += step_units
            revenue += step_revenue
            declined += step_declined
            if store_steps:
                steps.append(
                    StepResult(
                        timestamp=timestamp,
                        price=engine.current_price(),
                        units_sold=step_units,
                        revenue=step_revenue,
                        declined=step_declined,
                    )
                )

        return SaleResult(
            seed=sale.seed,
            starting_price=self.pricing.starting_price,
            final_price=engine.current_price(),
            peak_price=peak_price,
            units_sold=units_sold,
            revenue=revenue,
            refunded=ledger.total_transferred,
            purchases=purchases,
            declined_orders=declined,
            failed_refunds=failed_refunds,
            steps=steps,
        )


def _run_sale(args: tuple[PricingConfig, SaleConfig, bool]) -> SaleResult:
    pricing, sale, store_steps = args
    return SaleSimulator(pricing, sale).run(store_steps=store_steps)


class BatchRunner:
    """Runs many seeded sales, optionally across worker processes."""

    def __init__(
        self,
        *,
        n_simulations: int,
        pricing: PricingConfig,
        sale: SaleConfig,
        n_workers: int = 1,
        variance: Optional[DemandVariance] = None,
    ):
        self.n_simulations = n_simulations
        self.pricing = pricing
        self.base_sale = sale
        self.n_workers = n_workers
        self.variance = variance

    def _build_configs(self) -> list[SaleConfig]:
        """Build per-seed sale configs with optional variance."""
        configs = []
        for i in range(self.n_simulations):
            cfg = replace(self.base_sale, seed=i)
            if self.variance is not None:
                rng = np.random.default_rng(seed=i)
                v = self.variance
                burst_prob = (
                    rng.uniform(v.burst_prob_min, v.burst_prob_max)
                    if v.vary_burst_prob
                    else cfg.burst_prob
                )
                calm_rate = (
                    rng.uniform(v.calm_rate_min, v.calm_rate_max)
                    if v.vary_calm_rate
                    else cfg.calm_rate
                )
                reference_price = (
                    int(cfg.reference_price * rng.uniform(
                        v.reference_price_scale_min, v.reference_price_scale_max
                    ))
                    if v.vary_reference_price
                    else cfg.reference_price
                )
                cfg = replace(
                    cfg,
                    burst_prob=float(burst_prob),
                    calm_rate=float(calm_rate),
                    reference_price=max(1, reference_price),
                )
            configs.append(cfg)
        return configs

    def run(self, store_results: bool = False) -> BatchResult:
        """Run every simulation and aggregate the results."""
        jobs = [(self.pricing, cfg, store_results) for cfg in self._build_configs()]

        if self.n_workers > 1 and len(jobs) > 1:
            with ProcessPoolExecutor(max_workers=self.n_workers) as pool:
                results = list(pool.map(_run_sale, jobs))
        else:
            results = [_run_sale(job) for job in jobs]

        return BatchResult(
            n_simulations=len(results),
            total_units=sum(r.units_sold for r in results),
            total_revenue=sum(r.revenue for r in results),
            total_refunded=sum(r.refunded for r in results),
            total_declined=sum(r.declined_orders for r in results),
            total_failed_refunds=sum(r.failed_refunds for r in results),
            peak_price=max((r.peak_price for r in results), default=0),
            sale_results=results if store_results else [],
        )
