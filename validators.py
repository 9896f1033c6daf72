"""
Validation helpers for the Stockwise analytics service.
Defines the error taxonomy, analytics config checks and timestamp handling.
"""

from typing import Any, Dict, List, Mapping, Optional, Union
import datetime
import math
from analytics.options import Sensitivity, TimeWindow


class ValidationError(Exception):
    """Base class for rejected input."""
    pass


class InvalidArgument(ValidationError):
    """Raised for malformed arguments or configuration values."""
    pass


class InsufficientData(ValidationError):
    """Raised when a statistical primitive has no data to work with."""
    pass


# Accepted config keys, camelCase as sent by the dashboard, mapped to field names
CONFIG_KEY_ALIASES: Dict[str, str] = {
    "timeWindow": "time_window",
    "sensitivity": "sensitivity",
    "enableForecasting": "enable_forecasting",
    "enableAnomalyDetection": "enable_anomaly_detection",
    "enablePatternRecognition": "enable_pattern_recognition",
    "forecastPeriods": "forecast_periods",
}

MIN_FORECAST_PERIODS = 1
MAX_FORECAST_PERIODS = 30


def normalize_config_keys(raw: Mapping[str, Any]) -> Dict[str, Any]:
    """Map camelCase config keys onto field names, leaving unknown keys in place."""
    return {CONFIG_KEY_ALIASES.get(key, key): value for key, value in raw.items()}


def validate_config(raw: Mapping[str, Any]) -> List[str]:
    """
    Validate an analytics configuration mapping.

    Args:
        raw: Mapping using either camelCase or snake_case keys

    Returns:
        List of validation error messages (empty if valid)
    """
    if not isinstance(raw, Mapping):
        return [f"Config must be a mapping of options, got {type(raw).__name__}"]

    errors: List[str] = []
    values = normalize_config_keys(raw)
    known_fields = set(CONFIG_KEY_ALIASES.values())

    for key in values:
        if key not in known_fields:
            errors.append(f"Unknown config option: {key}")

    if "time_window" in values:
        allowed = [w.value for w in TimeWindow]
        if values["time_window"] not in allowed:
            errors.append(
                f"Invalid time_window: {values['time_window']!r} (expected one of {', '.join(allowed)})"
            )

    if "sensitivity" in values:
        allowed = [s.value for s in Sensitivity]
        if values["sensitivity"] not in allowed:
            errors.append(
                f"Invalid sensitivity: {values['sensitivity']!r} (expected one of {', '.join(allowed)})"
            )

    for flag in ("enable_forecasting", "enable_anomaly_detection", "enable_pattern_recognition"):
        if flag in values and not isinstance(values[flag], bool):
            errors.append(f"Invalid {flag}: {values[flag]!r} (expected a boolean)")

    if "forecast_periods" in values:
        periods = values["forecast_periods"]
        if isinstance(periods, bool) or not isinstance(periods, int):
            errors.append(f"Invalid forecast_periods: {periods!r} (expected an integer)")
        elif not (MIN_FORECAST_PERIODS <= periods <= MAX_FORECAST_PERIODS):
            errors.append(
                f"Invalid forecast_periods: {periods} "
                f"(expected {MIN_FORECAST_PERIODS}-{MAX_FORECAST_PERIODS})"
            )

    return errors


def validate_value(value: Any) -> float:
    """Coerce an observation value to a finite float."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidArgument(f"Observation value must be numeric, got {value!r}")
    value = float(value)
    if not math.isfinite(value):
        raise InvalidArgument(f"Observation value must be finite, got {value!r}")
    return value


_FALLBACK_FORMATS = [
    "%Y-%m-%dT%H:%M:%S.%fZ",
    "%Y-%m-%dT%H:%M:%SZ",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d",
    "%a, %d %b %Y %H:%M:%S %z",
]


def parse_timestamp(value: Union[str, datetime.datetime]) -> datetime.datetime:
    """
    Parse an ISO-8601 timestamp into a timezone-aware UTC datetime.

    Naive values are taken to be UTC.

    Raises:
        InvalidArgument: If the value cannot be parsed
    """
    if isinstance(value, datetime.datetime):
        dt = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        dt = None
        try:
            dt = datetime.datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            for fmt in _FALLBACK_FORMATS:
                try:
                    dt = datetime.datetime.strptime(text, fmt)
                    break
                except ValueError:
                    continue
        if dt is None:
            raise InvalidArgument(f"Unparseable timestamp: {value!r}")
    else:
        raise InvalidArgument(f"Timestamp must be an ISO-8601 string, got {value!r}")

    if dt.tzinfo is None:
        return dt.replace(tzinfo=datetime.timezone.utc)
    return dt.astimezone(datetime.timezone.utc)


def format_timestamp(dt: datetime.datetime) -> str:
    """Format a datetime as an ISO-8601 UTC string with a Z suffix."""
    if dt.tzinfo is not None:
        dt = dt.astimezone(datetime.timezone.utc).replace(tzinfo=None)
    return dt.isoformat() + "Z"


def utc_now() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


def is_within_window(
    date_obj: datetime.datetime,
    window: datetime.timedelta,
    now: Optional[datetime.datetime] = None
) -> bool:
    """
    Check if a timestamp falls inside [now - window, now].

    Args:
        date_obj: Timestamp to check
        window: Width of the window
        now: Upper bound of the window (defaults to current UTC time)

    Returns:
        True if within the window, False otherwise
    """
    now = parse_timestamp(now) if now is not None else utc_now()
    date_obj = parse_timestamp(date_obj)
    return now - window <= date_obj <= now
