"""
Pytest configuration and shared fixtures.
"""

from datetime import date

import pytest

from options_analytics.utils.types import OptionSpec


@pytest.fixture
def standard_params():
    """Standard at-the-money option parameters."""
    return {
        "S": 100.0,
        "K": 100.0,
        "T": 1.0,
        "r": 0.05,
        "sigma": 0.20,
    }


@pytest.fixture
def itm_call_params():
    """In-the-money call parameters."""
    return {
        "S": 110.0,
        "K": 100.0,
        "T": 1.0,
        "r": 0.05,
        "sigma": 0.20,
    }


@pytest.fixture
def standard_spec(standard_params):
    """Standard parameters as an OptionSpec for a call."""
    return OptionSpec(**standard_params, option_type="call")


@pytest.fixture
def expiry():
    """Common expiration date for strategy fixtures."""
    return date(2026, 11, 20)


@pytest.fixture
def trade_date():
    """Evaluation date 30 days before the common expiry."""
    return date(2026, 10, 21)
