"""Sale simulation components."""

from qdes_pricing.simulation.runner import (
    BatchResult,
    BatchRunner,
    DemandVariance,
    SaleConfig,
    SaleResult,
    SaleSimulator,
    StepResult,
)

__all__ = [
    "BatchResult",
    "BatchRunner",
    "DemandVariance",
    "SaleConfig",
    "SaleResult",
    "SaleSimulator",
    "StepResult",
]
