"""Test fixtures for pricing engine testing."""

from tests.fixtures.pricing_fixtures import (
    START_TIME,
    CurveProfile,
    EngineSnapshot,
    create_engine,
    exact_decay,
    get_pricing_config,
    reference_decay,
    reference_surge,
    snapshot_engine,
)

__all__ = [
    "START_TIME",
    "CurveProfile",
    "EngineSnapshot",
    "create_engine",
    "exact_decay",
    "get_pricing_config",
    "reference_decay",
    "reference_surge",
    "snapshot_engine",
]
