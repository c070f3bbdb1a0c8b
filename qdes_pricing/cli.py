"""Command-line interface for inspecting and simulating QDES pricing."""

import argparse
import sys
from typing import Optional

from qdes_pricing.core.clock import ManualClock
from qdes_pricing.core.config import PricingConfig, from_wei
from qdes_pricing.core.engine import PricingEngine
from qdes_pricing.core.errors import PricingError
from qdes_pricing.market.ledger import Ledger
from qdes_pricing.simulation.config import (
    BASELINE_SETTINGS,
    BASELINE_VARIANCE,
    build_pricing_config,
    build_sale_config,
    resolve_n_workers,
)
from qdes_pricing.simulation.runner import BatchRunner, DemandVariance


def _pricing_from_args(args: argparse.Namespace) -> PricingConfig:
    return build_pricing_config(
        starting_price=args.starting_price,
        bottom_price=args.bottom_price,
        decay_time=args.decay_time,
        growth_numerator=args.growth_numerator,
        growth_denominator=args.growth_denominator,
    )


def run_command(args: argparse.Namespace) -> int:
    """Run a batch of simulated sales and report revenue."""
    try:
        pricing = _pricing_from_args(args)
        sale = build_sale_config(
            seed=None,
            n_steps=args.steps,
            step_seconds=args.step_seconds,
            reference_price=args.reference_price,
            calm_rate=args.calm_rate,
            burst_rate=args.burst_rate,
            burst_prob=args.burst_prob,
            mean_quantity=args.mean_quantity,
        )
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    n_simulations = (
        args.simulations if args.simulations is not None else BASELINE_SETTINGS.n_simulations
    )
    # Pinned demand parameters are not varied across seeds
    variance = DemandVariance(
        burst_prob_min=BASELINE_VARIANCE.burst_prob_min,
        burst_prob_max=BASELINE_VARIANCE.burst_prob_max,
        vary_burst_prob=args.burst_prob is None and BASELINE_VARIANCE.vary_burst_prob,
        calm_rate_min=BASELINE_VARIANCE.calm_rate_min,
        calm_rate_max=BASELINE_VARIANCE.calm_rate_max,
        vary_calm_rate=args.calm_rate is None and BASELINE_VARIANCE.vary_calm_rate,
        reference_price_scale_min=BASELINE_VARIANCE.reference_price_scale_min,
        reference_price_scale_max=BASELINE_VARIANCE.reference_price_scale_max,
        vary_reference_price=(
            args.reference_price is None and BASELINE_VARIANCE.vary_reference_price
        ),
    )

    print(
        f"Curve: start {from_wei(pricing.starting_price)} ETH, "
        f"floor {from_wei(pricing.bottom_price)} ETH, "
        f"decay {pricing.decay_time}s, "
        f"growth {pricing.growth_numerator}/{pricing.growth_denominator}"
    )
    print(f"\nRunning {n_simulations} simulations of {sale.n_steps} steps...")

    runner = BatchRunner(
        n_simulations=n_simulations,
        pricing=pricing,
        sale=sale,
        n_workers=args.workers if args.workers is not None else resolve_n_workers(),
        variance=variance,
    )
    result = runner.run()

    print(f"\nMean revenue per sale: {result.mean_revenue:.6f} ETH")
    print(f"Mean units per sale:   {result.mean_units:.2f}")
    print(f"Average unit price:    {result.average_unit_price:.6f} ETH")
    print(f"Peak price:            {from_wei(result.peak_price):.6f} ETH")
    print(f"Declined orders:       {result.total_declined}")
    print(f"Failed refunds:        {result.total_failed_refunds}")
    return 0


def curve_command(args: argparse.Namespace) -> int:
    """Print the decay curve of a freshly started engine."""
    try:
        pricing = _pricing_from_args(args)
    except ValueError as e:
        print(f"Error: {e}")
        return 1
    if args.points < 2:
        print(f"Error: --points must be >= 2, got {args.points}")
        return 1

    clock = ManualClock(0)
    engine = PricingEngine(config=pricing, clock=clock)
    engine.start()

    print(f"{'elapsed (s)':>12}  {'price (ETH)':>24}")
    for i in range(args.points):
        elapsed = pricing.decay_time * i // (args.points - 1)
        clock.set(elapsed)
        print(f"{elapsed:>12}  {from_wei(engine.current_price()):>24}")
    return 0


def quote_command(args: argparse.Namespace) -> int:
    """Quote a purchase after optional prior purchases and idle time."""
    try:
        pricing = _pricing_from_args(args)
        clock = ManualClock(0)
        engine = PricingEngine(config=pricing, clock=clock, transfer=Ledger())
        engine.start()

        for quantity in args.prior:
            engine.purchase(quantity, engine.quote(quantity))
        clock.advance(args.elapsed)

        required = engine.quote(
            args.quantity,
            scale_numerator=args.scale_numerator,
            scale_denominator=args.scale_denominator,
        )
    except (PricingError, ValueError) as e:
        print(f"Error: {e}")
        return 1

    print(f"Stored price:     {from_wei(engine.last_price)} ETH")
    print(f"Current price:    {from_wei(engine.current_price())} ETH")
    print(f"Required payment: {from_wei(required)} ETH for {args.quantity} unit(s)")
    return 0


def _add_curve_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--starting-price",
        type=float,
        default=None,
        help="Starting price in ETH (defaults to shared baseline config)",
    )
    parser.add_argument(
        "--bottom-price",
        type=float,
        default=None,
        help="Floor price in ETH (defaults to shared baseline config)",
    )
    parser.add_argument(
        "--decay-time",
        type=int,
        default=None,
        help="Seconds to decay fully to the floor (defaults to shared baseline config)",
    )
    parser.add_argument(
        "--growth-numerator",
        type=int,
        default=None,
        help="Per-unit surge ratio numerator (defaults to shared baseline config)",
    )
    parser.add_argument(
        "--growth-denominator",
        type=int,
        default=None,
        help="Per-unit surge ratio denominator (defaults to shared baseline config)",
    )


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="QDES pricing - inspect the price curve and simulate sales",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  qdes-sim curve --decay-time 3600 --points 7
  qdes-sim quote 5 --prior 10 --elapsed 600
  qdes-sim run --simulations 50 --steps 720
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Run command
    run_parser = subparsers.add_parser("run", help="Simulate sales and report revenue")
    _add_curve_arguments(run_parser)
    run_parser.add_argument(
        "--simulations",
        type=int,
        default=None,
        help="Number of simulated sales (defaults to shared baseline config)",
    )
    run_parser.add_argument(
        "--steps",
        type=int,
        default=None,
        help="Steps per sale (defaults to shared baseline config)",
    )
    run_parser.add_argument(
        "--step-seconds",
        type=int,
        default=None,
        help="Seconds per step (defaults to shared baseline config)",
    )
    run_parser.add_argument(
        "--reference-price",
        type=float,
        default=None,
        help="Median buyer reservation price in ETH (defaults to shared baseline config)",
    )
    run_parser.add_argument(
        "--calm-rate",
        type=float,
        default=None,
        help="Buyer arrivals per calm step (defaults to shared baseline config)",
    )
    run_parser.add_argument(
        "--burst-rate",
        type=float,
        default=None,
        help="Buyer arrivals per burst step (defaults to shared baseline config)",
    )
    run_parser.add_argument(
        "--burst-prob",
        type=float,
        default=None,
        help="Probability a step is a burst (defaults to shared baseline config)",
    )
    run_parser.add_argument(
        "--mean-quantity",
        type=float,
        default=None,
        help="Mean units per order (defaults to shared baseline config)",
    )
    run_parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Worker processes (defaults to N_WORKERS or CPU count)",
    )
    run_parser.set_defaults(func=run_command)

    # Curve command
    curve_parser = subparsers.add_parser("curve", help="Print the decay curve")
    _add_curve_arguments(curve_parser)
    curve_parser.add_argument(
        "--points", type=int, default=11, help="Number of evenly spaced samples"
    )
    curve_parser.set_defaults(func=curve_command)

    # Quote command
    quote_parser = subparsers.add_parser("quote", help="Quote a purchase")
    _add_curve_arguments(quote_parser)
    quote_parser.add_argument("quantity", type=int, help="Units to quote")
    quote_parser.add_argument(
        "--prior",
        type=int,
        nargs="*",
        default=[],
        help="Quantities bought (in order) right after start",
    )
    quote_parser.add_argument(
        "--elapsed", type=int, default=0, help="Idle seconds before the quote"
    )
    quote_parser.add_argument("--scale-numerator", type=int, default=1)
    quote_parser.add_argument("--scale-denominator", type=int, default=1)
    quote_parser.set_defaults(func=quote_command)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
