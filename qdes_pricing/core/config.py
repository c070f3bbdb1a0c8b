"""Pricing curve configuration."""

from dataclasses import dataclass
from decimal import Decimal

# Storage domain of the price/timestamp pair
MAX_PRICE = 2**160 - 1
MAX_TIMESTAMP = 2**64 - 1

# 1 ether in wei
WAD = 10**18


@dataclass(frozen=True)
class PricingConfig:
    """Parameters of one QDES price stream.

    Prices are integers in the smallest currency unit (wei). Each unit
    bought multiplies the stored price by growth_numerator / growth_denominator;
    with no purchases the price eases from its last value down to
    bottom_price over decay_time seconds.

    A starting_price of 0 is accepted but makes a started engine look
    identical to an unstarted one if it is also started at time 0.
    """
    starting_price: int
    bottom_price: int
    decay_time: int
    growth_numerator: int = 101
    growth_denominator: int = 100

    def __post_init__(self) -> None:
        if self.growth_numerator <= 0:
            raise ValueError(f"growth_numerator must be > 0, got {self.growth_numerator}")
        if self.growth_denominator <= 0:
            raise ValueError(f"growth_denominator must be > 0, got {self.growth_denominator}")
        if self.decay_time <= 0:
            raise ValueError(f"decay_time must be > 0, got {self.decay_time}")
        for name in ("starting_price", "bottom_price"):
            value = getattr(self, name)
            if value < 0:
                raise ValueError(f"{name} must be >= 0, got {value}")
            if value > MAX_PRICE:
                raise ValueError(f"{name} must be <= {MAX_PRICE}, got {value}")

    @property
    def surges(self) -> bool:
        """Whether purchases push the price up at all."""
        return self.growth_numerator > self.growth_denominator

    @classmethod
    def from_ether(
        cls,
        starting_price: float,
        bottom_price: float,
        decay_time: int,
        growth_numerator: int = 101,
        growth_denominator: int = 100,
    ) -> "PricingConfig":
        """Build a config from prices given in whole ether."""
        return cls(
            starting_price=to_wei(starting_price),
            bottom_price=to_wei(bottom_price),
            decay_time=decay_time,
            growth_numerator=growth_numerator,
            growth_denominator=growth_denominator,
        )


def to_wei(amount: float) -> int:
    """Convert an ether amount to wei, going through str to avoid float noise."""
    return int(Decimal(str(amount)) * WAD)


def from_wei(amount: int) -> Decimal:
    """Convert a wei amount to ether."""
    return Decimal(amount) / Decimal(WAD)
