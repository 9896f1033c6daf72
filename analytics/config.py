"""
Analytics configuration supplied per engine invocation.
"""

from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Mapping, Optional
from analytics.options import Sensitivity, TimeWindow
from validators import InvalidArgument, validate_config, normalize_config_keys

__all__ = ["AnalyticsConfig", "DEFAULT_CONFIG", "Sensitivity", "TimeWindow"]


@dataclass(frozen=True)
class AnalyticsConfig:
    """Validated engine configuration; rejects unrecognized values at construction."""
    time_window: TimeWindow = TimeWindow.MONTH
    sensitivity: Sensitivity = Sensitivity.MEDIUM
    enable_forecasting: bool = True
    enable_anomaly_detection: bool = True
    enable_pattern_recognition: bool = True
    forecast_periods: int = 7

    def __post_init__(self):
        errors = validate_config({f.name: getattr(self, f.name) for f in fields(self)})
        if errors:
            raise InvalidArgument("; ".join(errors))
        # frozen: coerce plain strings onto the enums
        object.__setattr__(self, "time_window", TimeWindow(self.time_window))
        object.__setattr__(self, "sensitivity", Sensitivity(self.sensitivity))

    @classmethod
    def from_dict(cls, raw: Optional[Mapping[str, Any]] = None) -> "AnalyticsConfig":
        """
        Build a config by overlaying a partial mapping on the defaults.

        Args:
            raw: Partial config with camelCase or snake_case keys

        Raises:
            InvalidArgument: Listing every problem found in the mapping
        """
        raw = raw or {}
        errors = validate_config(raw)
        if errors:
            raise InvalidArgument("; ".join(errors))
        return cls(**normalize_config_keys(raw))

    def with_overrides(self, **overrides: Any) -> "AnalyticsConfig":
        return replace(self, **overrides)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "time_window": self.time_window.value,
            "sensitivity": self.sensitivity.value,
            "enable_forecasting": self.enable_forecasting,
            "enable_anomaly_detection": self.enable_anomaly_detection,
            "enable_pattern_recognition": self.enable_pattern_recognition,
            "forecast_periods": self.forecast_periods,
        }


DEFAULT_CONFIG = AnalyticsConfig()
