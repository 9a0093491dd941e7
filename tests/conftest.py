"""
Shared pytest fixtures for revenue forecasting tests.
"""
import pytest

from revenue_forecast.data import LedgerEntry
from revenue_forecast.periods import Period, add_months


def make_entries(values, start=Period(month=1, year=2022)):
    """One ledger entry per consecutive month, starting at ``start``."""
    return [
        LedgerEntry(period=add_months(start, i), amount=float(value))
        for i, value in enumerate(values)
    ]


@pytest.fixture
def linear_values():
    return [100, 200, 300, 400, 500, 600]


@pytest.fixture
def linear_entries(linear_values):
    return make_entries(linear_values)


@pytest.fixture
def alternating_entries():
    """24 months alternating 1000/1500: strict two-month cycle, no trend."""
    return make_entries([1000 if i % 2 == 0 else 1500 for i in range(24)])


@pytest.fixture
def seasonal_values():
    return [120, 90, 150, 200, 310, 280, 260, 240, 180, 160, 130, 400]


@pytest.fixture
def noisy_entries():
    """36 months with trend and yearly seasonality, deterministic."""
    values = []
    for i in range(36):
        seasonal = [0, -50, 30, 80, 120, 60, -20, -90, -40, 10, 70, 200][i % 12]
        wobble = ((i * 37) % 11) - 5
        values.append(1000 + 12 * i + seasonal + wobble)
    return make_entries(values)


@pytest.fixture
def entries_factory():
    return make_entries
