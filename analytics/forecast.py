"""
Short-horizon forecasting by least-squares linear regression.
"""

import random
from datetime import timedelta
from typing import List, Optional, Sequence, Tuple
from analytics.models import FORECAST_CATEGORY, Observation
from analytics.stats import standard_deviation
from analytics.trend import detect_trend
from validators import InvalidArgument, format_timestamp
from logger import get_logger

logger = get_logger("forecast")

MIN_POINTS = 5
NOISE_SCALE = 0.1


def fit_line(values: Sequence[float]) -> Tuple[float, float]:
    """
    Fit y = slope * x + intercept over x = 0..n-1 with closed-form sums.

    Returns:
        (slope, intercept)
    """
    n = len(values)
    x = list(range(n))

    sum_x = sum(x)
    sum_y = sum(values)
    sum_xy = sum(x[i] * values[i] for i in range(n))
    sum_x2 = sum(xi * xi for xi in x)

    denominator = n * sum_x2 - sum_x * sum_x
    slope = (n * sum_xy - sum_x * sum_y) / denominator if denominator != 0 else 0.0
    intercept = (sum_y - slope * sum_x) / n if n else 0.0
    return slope, intercept


def generate_forecast(
    observations: Sequence[Observation],
    periods: int,
    rng: Optional[random.Random] = None
) -> List[Observation]:
    """
    Project ``periods`` daily points beyond the last observation.

    Each point is the regression line plus noise of
    ``(rng.random() - 0.5) * stddev * 0.1``, floored at zero.

    Args:
        observations: Time-ordered observation window
        periods: Number of future points to produce
        rng: Noise source exposing ``random()``; seed it for reproducible output

    Returns:
        Forecast points tagged with category "forecast"; empty when the
        window holds fewer than MIN_POINTS observations

    Raises:
        InvalidArgument: If periods is negative or not an integer
    """
    if isinstance(periods, bool) or not isinstance(periods, int) or periods < 0:
        raise InvalidArgument(f"Forecast periods must be a non-negative integer, got {periods!r}")
    if len(observations) < MIN_POINTS:
        logger.debug(f"Skipping forecast: {len(observations)} points < {MIN_POINTS}")
        return []

    rng = rng or random.Random()
    values = [o.value for o in observations]
    n = len(values)
    slope, intercept = fit_line(values)
    noise_span = standard_deviation(values) * NOISE_SCALE

    logger.debug(
        f"Forecasting {periods} periods from {n} points: slope={slope:.4f} "
        f"intercept={intercept:.4f} ({detect_trend(values).description})"
    )

    last_time = observations[-1].time
    forecast: List[Observation] = []
    for i in range(1, periods + 1):
        predicted = slope * (n + i - 1) + intercept
        noise = (rng.random() - 0.5) * noise_span
        forecast.append(Observation(
            timestamp=format_timestamp(last_time + timedelta(days=i)),
            value=max(0.0, predicted + noise),
            category=FORECAST_CATEGORY,
        ))

    return forecast
