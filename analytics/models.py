"""
Data structures consumed and produced by the analytics engine.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional
from validators import InvalidArgument, parse_timestamp, validate_value

FORECAST_CATEGORY = "forecast"


class Direction(str, Enum):
    UP = "up"
    DOWN = "down"
    STABLE = "stable"


class Strength(str, Enum):
    WEAK = "weak"
    MODERATE = "moderate"
    STRONG = "strong"


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class AnomalyType(str, Enum):
    SPIKE = "spike"
    DROP = "drop"


class InsightType(str, Enum):
    TREND = "trend"
    ANOMALY = "anomaly"
    PATTERN = "pattern"
    CORRELATION = "correlation"
    FORECAST = "forecast"


# Insight importance shares the severity scale
Importance = Severity


@dataclass(frozen=True)
class Observation:
    """Single timestamped measurement, e.g. daily stock movement for an item."""
    timestamp: str
    value: float
    category: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "Observation":
        """
        Build an observation from a loosely typed mapping.

        Raises:
            InvalidArgument: If the timestamp or value is missing or malformed
        """
        if not isinstance(raw, Mapping):
            raise InvalidArgument(f"Observation must be a mapping, got {raw!r}")
        if "timestamp" not in raw or "value" not in raw:
            raise InvalidArgument(f"Observation requires timestamp and value: {dict(raw)!r}")
        timestamp = raw["timestamp"]
        if isinstance(timestamp, datetime):
            timestamp = timestamp.isoformat()
        parse_timestamp(timestamp)
        return cls(
            timestamp=timestamp,
            value=validate_value(raw["value"]),
            category=raw.get("category"),
            metadata=raw.get("metadata"),
        )

    @property
    def time(self) -> datetime:
        return parse_timestamp(self.timestamp)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"timestamp": self.timestamp, "value": self.value}
        if self.category is not None:
            data["category"] = self.category
        if self.metadata is not None:
            data["metadata"] = self.metadata
        return data


@dataclass(frozen=True)
class TrendAnalysis:
    direction: Direction
    strength: Strength
    confidence: float
    change_percent: float
    description: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "direction": self.direction.value,
            "strength": self.strength.value,
            "confidence": self.confidence,
            "change_percent": self.change_percent,
            "description": self.description,
        }


@dataclass(frozen=True)
class Anomaly:
    id: str
    timestamp: str
    value: float
    expected_value: float
    severity: Severity
    type: AnomalyType
    description: str
    confidence: float
    impact: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "value": self.value,
            "expected_value": self.expected_value,
            "severity": self.severity.value,
            "type": self.type.value,
            "description": self.description,
            "confidence": self.confidence,
            "impact": self.impact,
        }


@dataclass(frozen=True)
class Insight:
    id: str
    type: InsightType
    title: str
    description: str
    importance: Importance
    actionable: bool
    recommendations: List[str]
    timestamp: str
    data: Optional[Any] = None

    def to_dict(self) -> Dict[str, Any]:
        data = self.data
        if isinstance(data, list):
            data = [item.to_dict() if hasattr(item, "to_dict") else item for item in data]
        return {
            "id": self.id,
            "type": self.type.value,
            "title": self.title,
            "description": self.description,
            "importance": self.importance.value,
            "actionable": self.actionable,
            "recommendations": list(self.recommendations),
            "data": data,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class AnalysisMetrics:
    """
    Summary statistics of the analysed window.

    ``variance`` holds the population standard deviation; the name is kept
    for existing consumers and ``std_dev`` carries the same value.
    """
    total: float = 0.0
    average: float = 0.0
    min: float = 0.0
    max: float = 0.0
    variance: float = 0.0
    std_dev: float = 0.0
    count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "average": self.average,
            "min": self.min,
            "max": self.max,
            "variance": self.variance,
            "std_dev": self.std_dev,
            "count": self.count,
        }


@dataclass(frozen=True)
class AnalysisResult:
    """Result bundle returned by the engine facade."""
    trend: TrendAnalysis
    anomalies: List[Anomaly] = field(default_factory=list)
    forecast: List[Observation] = field(default_factory=list)
    insights: List[Insight] = field(default_factory=list)
    metrics: AnalysisMetrics = field(default_factory=AnalysisMetrics)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "trend": self.trend.to_dict(),
            "anomalies": [a.to_dict() for a in self.anomalies],
            "forecast": [p.to_dict() for p in self.forecast],
            "insights": [i.to_dict() for i in self.insights],
            "metrics": self.metrics.to_dict(),
        }
