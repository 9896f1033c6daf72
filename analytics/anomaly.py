"""
Anomaly detection for observation windows.
Flags points that stray from a rolling expectation by more than a
sensitivity-dependent multiple of the window's standard deviation.
"""

from typing import Dict, List, Sequence, Union
from analytics.config import Sensitivity
from analytics.models import Anomaly, AnomalyType, Observation, Severity
from analytics.stats import moving_average, standard_deviation
from validators import InvalidArgument
from logger import get_logger

logger = get_logger("anomaly_detector")

MIN_POINTS = 10
MOVING_AVERAGE_WINDOW = 7
WARMUP_POINTS = 7
MAX_CONFIDENCE = 95.0

SENSITIVITY_MULTIPLIERS: Dict[Sensitivity, float] = {
    Sensitivity.LOW: 2.5,
    Sensitivity.MEDIUM: 2.0,
    Sensitivity.HIGH: 1.5,
}

IMPACT_BY_SEVERITY: Dict[Severity, str] = {
    Severity.CRITICAL: "High impact on operations",
    Severity.HIGH: "Moderate impact expected",
    Severity.MEDIUM: "Low impact",
    Severity.LOW: "Low impact",
}


def _coerce_sensitivity(sensitivity: Union[Sensitivity, str]) -> Sensitivity:
    try:
        return Sensitivity(sensitivity)
    except ValueError:
        raise InvalidArgument(f"Unknown sensitivity: {sensitivity!r}") from None


def classify_severity(deviation: float, threshold: float) -> Severity:
    """Grade a deviation that already exceeds the threshold."""
    if deviation > threshold * 2:
        return Severity.CRITICAL
    if deviation > threshold * 1.5:
        return Severity.HIGH
    if deviation > threshold * 1.2:
        return Severity.MEDIUM
    return Severity.LOW


def describe_deviation(anomaly_type: AnomalyType, value: float, expected: float) -> str:
    label = "Unusual spike" if anomaly_type == AnomalyType.SPIKE else "Unusual drop"
    if expected == 0:
        return f"{label} detected (undefined deviation: expected value is zero)"
    percent = (value - expected) / expected * 100
    return f"{label} detected ({percent:.1f}% deviation)"


def detect_anomalies(
    observations: Sequence[Observation],
    sensitivity: Union[Sensitivity, str] = Sensitivity.MEDIUM
) -> List[Anomaly]:
    """
    Detect anomalous observations.

    Args:
        observations: Time-ordered observation window
        sensitivity: low, medium or high; higher flags more points

    Returns:
        One Anomaly per qualifying index, in window order. Empty when the
        window holds fewer than MIN_POINTS observations.
    """
    sensitivity = _coerce_sensitivity(sensitivity)
    if len(observations) < MIN_POINTS:
        logger.debug(f"Skipping anomaly detection: {len(observations)} points < {MIN_POINTS}")
        return []

    values = [o.value for o in observations]
    expected_values = moving_average(values, MOVING_AVERAGE_WINDOW)
    threshold = SENSITIVITY_MULTIPLIERS[sensitivity] * standard_deviation(values)
    if threshold == 0:
        # constant window; float rounding in the moving average is not a deviation
        return []

    anomalies: List[Anomaly] = []
    for index in range(WARMUP_POINTS, len(observations)):
        point = observations[index]
        expected = expected_values[index]
        deviation = abs(point.value - expected)
        if deviation <= threshold:
            continue

        severity = classify_severity(deviation, threshold)
        anomaly_type = AnomalyType.SPIKE if point.value > expected else AnomalyType.DROP
        confidence = min(MAX_CONFIDENCE, deviation / threshold * 50)

        anomalies.append(Anomaly(
            id=f"anomaly-{index}",
            timestamp=point.timestamp,
            value=point.value,
            expected_value=expected,
            severity=severity,
            type=anomaly_type,
            description=describe_deviation(anomaly_type, point.value, expected),
            confidence=confidence,
            impact=IMPACT_BY_SEVERITY[severity],
        ))

    logger.debug(
        f"Detected {len(anomalies)} anomalies in {len(observations)} points "
        f"(sensitivity={sensitivity.value}, threshold={threshold:.3f})"
    )
    return anomalies
