"""
Trend detection over a time-windowed series of values.
"""

from typing import Sequence
from analytics.models import Direction, Strength, TrendAnalysis
from analytics.stats import mean, standard_deviation
from logger import get_logger

logger = get_logger("trend")

STABLE_THRESHOLD = 5.0
MODERATE_THRESHOLD = 10.0
STRONG_THRESHOLD = 20.0
MIN_CONFIDENCE = 50.0
MAX_CONFIDENCE = 95.0

_DIRECTION_LABELS = {
    Direction.UP: "Upward trend",
    Direction.DOWN: "Downward trend",
    Direction.STABLE: "Stable trend",
}


def insufficient_trend(description: str = "Insufficient data for trend analysis") -> TrendAnalysis:
    """Degenerate trend used when there is too little data to compare."""
    return TrendAnalysis(
        direction=Direction.STABLE,
        strength=Strength.WEAK,
        confidence=0.0,
        change_percent=0.0,
        description=description,
    )


def classify_change(change_percent: float):
    """
    Map a percentage change onto a direction and strength.

    Returns:
        (Direction, Strength) tuple
    """
    magnitude = abs(change_percent)
    if magnitude < STABLE_THRESHOLD:
        return Direction.STABLE, Strength.WEAK

    direction = Direction.UP if change_percent > 0 else Direction.DOWN
    if magnitude > STRONG_THRESHOLD:
        strength = Strength.STRONG
    elif magnitude > MODERATE_THRESHOLD:
        strength = Strength.MODERATE
    else:
        strength = Strength.WEAK
    return direction, strength


def describe_trend(direction: Direction, strength: Strength, change_percent: float) -> str:
    return f"{_DIRECTION_LABELS[direction]} with {strength.value} strength ({change_percent:+.1f}% change)"


def detect_trend(values: Sequence[float]) -> TrendAnalysis:
    """
    Classify directional movement by comparing first-half and second-half means.

    Args:
        values: Time-ordered values of the analysed window

    Returns:
        TrendAnalysis; a zero-confidence stable trend when fewer than two values
    """
    n = len(values)
    if n < 2:
        return insufficient_trend()

    half = n // 2
    first_avg = mean(values[:half])
    second_avg = mean(values[half:])

    if first_avg == 0:
        # percentage change from zero is undefined
        change_percent = 0.0
        direction, strength = Direction.STABLE, Strength.WEAK
    else:
        change_percent = (second_avg - first_avg) / first_avg * 100
        direction, strength = classify_change(change_percent)

    spread = standard_deviation(values) / max(second_avg, 1.0)
    confidence = min(MAX_CONFIDENCE, max(MIN_CONFIDENCE, 100 - spread * 10))

    logger.debug(
        f"Trend over {n} points: {direction.value}/{strength.value} "
        f"change={change_percent:.2f}% confidence={confidence:.1f}"
    )

    return TrendAnalysis(
        direction=direction,
        strength=strength,
        confidence=confidence,
        change_percent=change_percent,
        description=describe_trend(direction, strength, change_percent),
    )
