"""
Insight generation.
Turns trend, anomaly and raw-window results into prioritized findings.
"""

from datetime import datetime
from typing import List, Optional, Sequence
from analytics.config import AnalyticsConfig
from analytics.models import (
    Anomaly, Direction, Importance, Insight, InsightType, Observation, Severity,
    Strength, TrendAnalysis,
)
from analytics.stats import mean
from validators import format_timestamp, utc_now

TREND_CONFIDENCE_THRESHOLD = 70.0
RECENT_POINTS = 7
PATTERN_CHANGE_THRESHOLD = 0.15

TREND_TITLES = {
    Direction.UP: "Growth Detected",
    Direction.DOWN: "Decline Detected",
    Direction.STABLE: "Stability Detected",
}

TREND_IMPORTANCE = {
    Strength.STRONG: Importance.HIGH,
    Strength.MODERATE: Importance.MEDIUM,
    Strength.WEAK: Importance.LOW,
}

TREND_RECOMMENDATIONS = {
    Direction.UP: [
        "Consider increasing inventory to meet growing demand",
        "Analyze factors contributing to growth",
        "Plan for capacity expansion",
    ],
    Direction.DOWN: [
        "Investigate causes of decline",
        "Consider promotional strategies",
        "Review pricing and market conditions",
    ],
    Direction.STABLE: [
        "Monitor for any changes in pattern",
        "Maintain current operational levels",
    ],
}

ANOMALY_RECOMMENDATIONS = [
    "Investigate root causes immediately",
    "Check data quality and collection processes",
    "Review operational changes during anomaly periods",
    "Implement monitoring alerts for similar patterns",
]

PATTERN_RECOMMENDATIONS = [
    "Analyze recent operational changes",
    "Review external factors affecting performance",
    "Consider adjusting forecasts and plans",
]


def trend_insight(trend: TrendAnalysis, timestamp: str) -> Optional[Insight]:
    if trend.confidence <= TREND_CONFIDENCE_THRESHOLD:
        return None
    return Insight(
        id="trend-analysis",
        type=InsightType.TREND,
        title=TREND_TITLES[trend.direction],
        description=trend.description,
        importance=TREND_IMPORTANCE[trend.strength],
        actionable=trend.direction != Direction.STABLE,
        recommendations=list(TREND_RECOMMENDATIONS[trend.direction]),
        timestamp=timestamp,
    )


def critical_anomaly_insight(anomalies: Sequence[Anomaly], timestamp: str) -> Optional[Insight]:
    critical = [a for a in anomalies if a.severity == Severity.CRITICAL]
    if not critical:
        return None
    noun = "Anomaly" if len(critical) == 1 else "Anomalies"
    return Insight(
        id="critical-anomalies",
        type=InsightType.ANOMALY,
        title=f"{len(critical)} Critical {noun} Detected",
        description="Significant deviations from expected patterns require immediate attention",
        importance=Importance.CRITICAL,
        actionable=True,
        recommendations=list(ANOMALY_RECOMMENDATIONS),
        timestamp=timestamp,
        data=critical,
    )


def recent_pattern_insight(observations: Sequence[Observation], timestamp: str) -> Optional[Insight]:
    """Compare the last RECENT_POINTS observations against the whole window."""
    if not observations:
        return None
    values = [o.value for o in observations]
    overall_avg = mean(values)
    if overall_avg == 0:
        return None
    recent_avg = mean(values[-RECENT_POINTS:])
    relative_change = abs(recent_avg - overall_avg) / abs(overall_avg)
    if relative_change <= PATTERN_CHANGE_THRESHOLD:
        return None

    comparison = "significantly higher" if recent_avg > overall_avg else "significantly lower"
    return Insight(
        id="recent-pattern-change",
        type=InsightType.PATTERN,
        title="Recent Pattern Change Detected",
        description=f"Recent values are {comparison} than historical average",
        importance=Importance.MEDIUM,
        actionable=True,
        recommendations=list(PATTERN_RECOMMENDATIONS),
        timestamp=timestamp,
        data={
            "recent_average": recent_avg,
            "overall_average": overall_avg,
            "relative_change": relative_change,
        },
    )


def generate_insights(
    observations: Sequence[Observation],
    anomalies: Sequence[Anomaly],
    trend: TrendAnalysis,
    config: AnalyticsConfig,
    now: Optional[datetime] = None
) -> List[Insight]:
    """
    Synthesize findings in priority order: trend, critical anomalies, recent pattern.

    Args:
        observations: Analysed observation window
        anomalies: Anomalies detected in that window
        trend: Trend of that window
        config: Active configuration; pattern recognition can be switched off
        now: Time stamped onto each insight (defaults to current UTC time)

    Returns:
        At most one insight of each kind
    """
    timestamp = format_timestamp(now or utc_now())
    candidates = [
        trend_insight(trend, timestamp),
        critical_anomaly_insight(anomalies, timestamp),
    ]
    if config.enable_pattern_recognition:
        candidates.append(recent_pattern_insight(observations, timestamp))
    return [insight for insight in candidates if insight is not None]
