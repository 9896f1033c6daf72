"""
Statistical primitives shared by the trend, anomaly and forecast components.
"""

import statistics
from typing import List, Sequence
from validators import InvalidArgument, InsufficientData


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean; 0.0 for an empty sequence."""
    if not values:
        return 0.0
    return sum(values) / len(values)


def moving_average(values: Sequence[float], window: int) -> List[float]:
    """
    Causal moving average.

    Element ``i`` is the mean of ``values[max(0, i - window + 1) .. i]``, so the
    first few points average over a shorter leading window.

    Args:
        values: Numeric sequence
        window: Window size, must be positive

    Returns:
        List with the same length as ``values``

    Raises:
        InvalidArgument: If window is not positive
    """
    if isinstance(window, bool) or not isinstance(window, int) or window <= 0:
        raise InvalidArgument(f"Moving average window must be a positive integer, got {window!r}")

    result: List[float] = []
    for i in range(len(values)):
        start = max(0, i - window + 1)
        chunk = values[start:i + 1]
        result.append(sum(chunk) / len(chunk))
    return result


def standard_deviation(values: Sequence[float]) -> float:
    """
    Population standard deviation (divides by N).

    Raises:
        InsufficientData: If values is empty
    """
    if not values:
        raise InsufficientData("Standard deviation requires at least one value")
    return statistics.pstdev(values)
