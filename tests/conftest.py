"""
Shared fixtures for analytics tests.
"""

import pytest
from datetime import datetime, timedelta, timezone
from analytics.models import Observation


START = datetime(2024, 1, 1, tzinfo=timezone.utc)


def daily(values, start=START):
    """Build one observation per day starting at ``start``."""
    return [
        Observation(timestamp=(start + timedelta(days=i)).isoformat(), value=float(v))
        for i, v in enumerate(values)
    ]


class FixedNoise:
    """Noise source whose draws sit at the midpoint, i.e. zero noise."""

    def random(self):
        return 0.5


@pytest.fixture
def flat_series():
    """Ten identical daily observations."""
    return daily([100] * 10)


@pytest.fixture
def linear_series():
    """Fourteen daily observations rising from 10 to 140."""
    return daily(range(10, 150, 10))


@pytest.fixture
def spike_series():
    """Twelve stable observations with a tenfold spike at index 9."""
    values = [100] * 12
    values[9] = 1000
    return daily(values)
