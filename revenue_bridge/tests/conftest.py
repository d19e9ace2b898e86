"""
Pytest Configuration and Shared Fixtures for Revenue Bridge Tests.

This module provides fixtures and configuration for all tests, supporting:
- Async route handler tests with pytest-asyncio
- Generated single-period and cumulative models for a fixed seed
- Hand-built driver lists for insight and view-model tests
- An isolated Settings instance unaffected by the developer's environment
"""

from typing import Dict, List, Optional

import pytest

from revenue_bridge.core.config import Settings, get_settings
from revenue_bridge.models import (
    ClientDetail,
    Driver,
    DriverKind,
    PeriodDataModel,
    Segment,
    ViewType,
)
from revenue_bridge.services.period_generator import DRIVER_NAMES, DRIVER_ORDER, generate_single_period
from revenue_bridge.services.revenue_data import generate_revenue_data

TEST_SEED = "test-seed"
TEST_PERIOD = "2025-06"


# ============================================================
# PYTEST HOOKS
# ============================================================

def pytest_configure(config) -> None:
    """
    Configure custom pytest markers for test organization.

    Custom markers defined:
    - slow: Marks tests as slow (deselect with -m "not slow")
    - invariant: Marks tests asserting bridge closure and detail sums

    Usage:
        pytest -m "not slow"
        pytest -m invariant
    """
    config.addinivalue_line(
        'markers',
        'slow: marks tests as slow (deselect with -m "not slow")'
    )
    config.addinivalue_line(
        'markers',
        'invariant: marks tests asserting bridge and distribution invariants'
    )


# ============================================================
# SETTINGS FIXTURES
# ============================================================

@pytest.fixture
def settings() -> Settings:
    """Settings built from defaults only (no .env, no environment)."""
    return Settings(_env_file=None)


@pytest.fixture
def clear_settings_cache():
    """Clear the get_settings cache before and after a test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# ============================================================
# GENERATED MODEL FIXTURES
# ============================================================

@pytest.fixture
def monthly_model() -> PeriodDataModel:
    """Single month for the reference selection."""
    return generate_single_period(TEST_PERIOD, Segment.EXISTING_CLIENTS, TEST_SEED, 0)


@pytest.fixture
def new_clients_model() -> PeriodDataModel:
    return generate_single_period(TEST_PERIOD, Segment.NEW_CLIENTS, TEST_SEED, 0)


@pytest.fixture
def quarterly_model() -> PeriodDataModel:
    return generate_revenue_data(
        TEST_PERIOD, Segment.EXISTING_CLIENTS, ViewType.QUARTERLY_CUMULATIVE, TEST_SEED
    )


@pytest.fixture
def quarter_months() -> List[PeriodDataModel]:
    """The three single months a quarterly view folds, anchor first."""
    return [
        generate_single_period(TEST_PERIOD, Segment.EXISTING_CLIENTS, TEST_SEED, offset)
        for offset in (0, -1, -2)
    ]


# ============================================================
# HAND-BUILT DATA FIXTURES
# ============================================================

def make_detail(name: str, variance: float, **extra) -> ClientDetail:
    """Build a ClientDetail with plan 1000 and actual plan + variance."""
    return ClientDetail(
        clientName=name,
        planValue=1000.0,
        actualValue=1000.0 + variance,
        variance=variance,
        **extra,
    )


def make_drivers(
    values: Dict[DriverKind, float],
    details: Optional[Dict[DriverKind, List[ClientDetail]]] = None,
) -> List[Driver]:
    """Build the six drivers in bridge order; missing kinds default to zero."""
    details = details or {}
    return [
        Driver(
            kind=kind,
            name=DRIVER_NAMES[kind],
            value=values.get(kind, 0.0),
            note=f"{kind.value} note",
            clientDetails=details.get(kind, []),
        )
        for kind in DRIVER_ORDER
    ]
