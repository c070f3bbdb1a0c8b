"""Pytest configuration and shared fixtures for pricing engine tests.

This module provides:
- Shared fixtures for engines, clocks and ledgers
- Pytest markers for test categorization
- Custom assertions for pricing properties
"""

from typing import Optional

import pytest

from qdes_pricing.core.clock import ManualClock
from qdes_pricing.core.config import PricingConfig
from qdes_pricing.core.engine import PricingEngine
from qdes_pricing.core.state import PurchaseReceipt
from qdes_pricing.market.ledger import Ledger
from tests.fixtures.pricing_fixtures import (
    START_TIME,
    CurveProfile,
    EngineSnapshot,
    get_pricing_config,
    reference_surge,
    snapshot_engine,
)


# ============================================================================
# Pytest Hooks
# ============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "economic: Core pricing property tests (decay, surge, settlement)"
    )
    config.addinivalue_line(
        "markers", "edge_case: Edge case and stress tests with extreme inputs"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests spanning multiple components"
    )
    config.addinivalue_line(
        "markers", "slow: Tests taking more than 5 seconds to run"
    )


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on location and name."""
    for item in items:
        if "edge_case" in item.nodeid or "edge_case" in item.name:
            item.add_marker(pytest.mark.edge_case)

        if any(keyword in item.nodeid for keyword in ["decay", "surge", "settlement", "refund"]):
            item.add_marker(pytest.mark.economic)

        if any(keyword in item.nodeid for keyword in ["simulation", "concurrency", "cli"]):
            item.add_marker(pytest.mark.integration)


# ============================================================================
# Engine Fixtures
# ============================================================================


@pytest.fixture
def standard_config() -> PricingConfig:
    """1 ETH start, 0.5 ETH floor, 1 day decay, 101/100 growth."""
    return get_pricing_config(CurveProfile.STANDARD)


@pytest.fixture
def clock() -> ManualClock:
    """Manual clock parked at START_TIME."""
    return ManualClock(START_TIME)


@pytest.fixture
def ledger() -> Ledger:
    """Empty ledger accepting every recipient."""
    return Ledger()


@pytest.fixture
def engine(standard_config: PricingConfig, clock: ManualClock, ledger: Ledger) -> PricingEngine:
    """Unstarted engine with the standard curve."""
    return PricingEngine(config=standard_config, clock=clock, transfer=ledger)


@pytest.fixture
def started_engine(engine: PricingEngine) -> PricingEngine:
    """Standard engine started at START_TIME."""
    engine.start()
    return engine


# ============================================================================
# Custom Assertions
# ============================================================================


class PricingAssertions:
    """Assertion helpers for pricing properties with clear error messages."""

    @staticmethod
    def assert_state_unchanged(before: EngineSnapshot, engine: PricingEngine) -> None:
        """Assert a failed call left the engine exactly as it was."""
        after = snapshot_engine(engine)
        assert after == before, f"Engine state changed after failure: {before} -> {after}"

    @staticmethod
    def assert_settled(
        receipt: PurchaseReceipt,
        expected_price: int,
        config: PricingConfig,
        expected_refund: Optional[int] = None,
    ) -> None:
        """Assert a receipt charged expected_price per unit and surged correctly."""
        assert receipt.unit_price == expected_price, (
            f"unit price mismatch: expected {expected_price}, got {receipt.unit_price}"
        )
        assert receipt.required_payment == receipt.quantity * receipt.scaled_unit_price
        expected_new = reference_surge(
            expected_price,
            receipt.quantity,
            config.growth_numerator,
            config.growth_denominator,
        )
        assert receipt.new_price == expected_new, (
            f"surged price mismatch: expected {expected_new}, got {receipt.new_price}"
        )
        if expected_refund is not None:
            assert receipt.refunded == expected_refund, (
                f"refund mismatch: expected {expected_refund}, got {receipt.refunded}"
            )


@pytest.fixture
def pricing_assert() -> PricingAssertions:
    """Fixture providing custom pricing assertions."""
    return PricingAssertions()
