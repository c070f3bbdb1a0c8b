"""Surge accumulation tests.

Each unit bought multiplies the stored price by the growth ratio, with
truncation after every step. These tests pin that stepwise behaviour
against an independent reference and against the closed form it must
not be confused with.
"""

import pytest

from qdes_pricing.core.config import WAD, PricingConfig
from qdes_pricing.core.curve import surged_price
from tests.fixtures.pricing_fixtures import (
    START_TIME,
    CurveProfile,
    create_engine,
    get_pricing_config,
    reference_surge,
)


class TestStepwiseSurge:
    """Stored price after a purchase."""

    @pytest.mark.parametrize("quantity", [1, 7, 50])
    @pytest.mark.parametrize("profile", [CurveProfile.STANDARD, CurveProfile.STEEP, CurveProfile.TINY])
    def test_matches_iterative_reference(self, profile, quantity):
        config = get_pricing_config(profile)
        engine, _ = create_engine(config)
        price = engine.current_price()

        engine.purchase(quantity, engine.quote(quantity))

        expected = reference_surge(
            price, quantity, config.growth_numerator, config.growth_denominator
        )
        assert engine.last_price == expected

    def test_truncates_at_every_step(self):
        """Stepwise truncation differs from flooring the compounded ratio once."""
        stepwise = surged_price(999, 2, 101, 100)
        closed_form = 999 * 101**2 // 100**2

        assert stepwise == 1018
        assert closed_form == 1019
        assert stepwise != closed_form

    def test_two_single_purchases_equal_one_double_at_same_instant(self):
        config = get_pricing_config(CurveProfile.STEEP)
        split, _ = create_engine(config)
        batched, _ = create_engine(config)

        split.purchase(1, split.quote(1))
        split.purchase(1, split.quote(1))
        batched.purchase(2, batched.quote(2))

        assert split.last_price == batched.last_price

    def test_batch_is_cheaper_than_split_purchases(self):
        """A batch pays the pre-surge price for every unit."""
        config = get_pricing_config(CurveProfile.STEEP)
        split, _ = create_engine(config)
        batched, _ = create_engine(config)

        split_cost = sum(split.purchase(1, split.quote(1)).required_payment for _ in range(5))
        batch_cost = batched.purchase(5, batched.quote(5)).required_payment

        assert batch_cost == 5 * config.starting_price
        assert batch_cost < split_cost

    def test_surge_starts_from_decayed_price(self):
        config = get_pricing_config(CurveProfile.STANDARD)
        engine, clock = create_engine(config)
        clock.advance(config.decay_time // 2)
        decayed = engine.current_price()
        assert decayed < config.starting_price

        receipt = engine.purchase(3, engine.quote(3))

        assert receipt.unit_price == decayed
        assert engine.last_price == reference_surge(decayed, 3, 101, 100)
        assert engine.last_timestamp == START_TIME + config.decay_time // 2

    def test_surge_from_floor_after_full_decay(self):
        config = get_pricing_config(CurveProfile.STANDARD)
        engine, clock = create_engine(config)
        clock.advance(config.decay_time * 3)

        engine.purchase(1, engine.quote(1))

        assert engine.last_price == config.bottom_price * 101 // 100


class TestGrowthRatios:
    """Ratios other than the default."""

    def test_unit_ratio_keeps_price(self):
        config = PricingConfig(
            starting_price=WAD,
            bottom_price=0,
            decay_time=60,
            growth_numerator=1,
            growth_denominator=1,
        )
        engine, _ = create_engine(config)

        engine.purchase(10, engine.quote(10))

        assert engine.last_price == WAD
        assert not config.surges

    def test_ratio_below_one_lowers_price(self):
        config = PricingConfig(
            starting_price=WAD,
            bottom_price=0,
            decay_time=60,
            growth_numerator=9,
            growth_denominator=10,
        )
        engine, _ = create_engine(config)

        engine.purchase(2, engine.quote(2))

        assert engine.last_price == WAD * 81 // 100

    def test_update_config_applies_to_next_purchase(self):
        engine, _ = create_engine(get_pricing_config(CurveProfile.STANDARD))
        steep = PricingConfig(
            starting_price=WAD,
            bottom_price=WAD // 2,
            decay_time=86400,
            growth_numerator=2,
            growth_denominator=1,
        )

        engine.update_config(steep)
        engine.purchase(1, engine.quote(1))

        assert engine.last_price == 2 * WAD

    def test_zero_price_stays_zero(self):
        assert surged_price(0, 100, 101, 100) == 0
