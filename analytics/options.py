"""
Enumerated analytics options.
"""

from datetime import timedelta
from enum import Enum


class TimeWindow(str, Enum):
    """Look-back window applied to observations before analysis."""
    WEEK = "7d"
    MONTH = "30d"
    QUARTER = "90d"
    YEAR = "1y"

    @property
    def timedelta(self) -> timedelta:
        return _WINDOW_SPANS[self]


_WINDOW_SPANS = {
    TimeWindow.WEEK: timedelta(days=7),
    TimeWindow.MONTH: timedelta(days=30),
    TimeWindow.QUARTER: timedelta(days=90),
    TimeWindow.YEAR: timedelta(days=365),
}


class Sensitivity(str, Enum):
    """How aggressively deviations are flagged as anomalies."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
