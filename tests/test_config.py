"""
Tests for configuration and input validation.
"""

import pytest
from datetime import datetime, timedelta, timezone
from analytics.config import AnalyticsConfig, DEFAULT_CONFIG, Sensitivity, TimeWindow
from analytics.models import Observation
from validators import (
    InvalidArgument, format_timestamp, is_within_window, parse_timestamp, validate_config,
)


def test_defaults():
    assert DEFAULT_CONFIG.time_window == TimeWindow.MONTH
    assert DEFAULT_CONFIG.sensitivity == Sensitivity.MEDIUM
    assert DEFAULT_CONFIG.enable_forecasting is True
    assert DEFAULT_CONFIG.enable_anomaly_detection is True
    assert DEFAULT_CONFIG.forecast_periods == 7


def test_from_dict_accepts_camel_case():
    config = AnalyticsConfig.from_dict({"timeWindow": "90d", "sensitivity": "high", "forecastPeriods": 14})
    assert config.time_window == TimeWindow.QUARTER
    assert config.sensitivity == Sensitivity.HIGH
    assert config.forecast_periods == 14
    assert config.enable_forecasting is True


def test_strings_coerced_to_enums():
    config = AnalyticsConfig(time_window="1y", sensitivity="low")
    assert config.time_window is TimeWindow.YEAR
    assert config.sensitivity is Sensitivity.LOW


@pytest.mark.parametrize("overrides", [
    {"time_window": "14d"},
    {"sensitivity": "extreme"},
    {"forecast_periods": 0},
    {"forecast_periods": 31},
    {"forecast_periods": -3},
    {"forecast_periods": True},
    {"enable_forecasting": "yes"},
])
def test_invalid_values_rejected(overrides):
    with pytest.raises(InvalidArgument):
        AnalyticsConfig(**overrides)


def test_unknown_option_rejected():
    with pytest.raises(InvalidArgument) as exc_info:
        AnalyticsConfig.from_dict({"refreshInterval": 30000})
    assert "refreshInterval" in str(exc_info.value)


def test_validate_config_reports_every_problem():
    errors = validate_config({"timeWindow": "2w", "sensitivity": "max", "forecastPeriods": 99})
    assert len(errors) == 3


def test_validate_config_valid():
    assert validate_config({"timeWindow": "7d", "enableAnomalyDetection": False}) == []


def test_with_overrides_revalidates():
    with pytest.raises(InvalidArgument):
        DEFAULT_CONFIG.with_overrides(forecast_periods=50)
    assert DEFAULT_CONFIG.with_overrides(forecast_periods=3).forecast_periods == 3


def test_time_window_spans():
    assert TimeWindow.WEEK.timedelta == timedelta(days=7)
    assert TimeWindow.YEAR.timedelta == timedelta(days=365)


def test_to_dict():
    assert AnalyticsConfig(time_window="7d").to_dict()["time_window"] == "7d"


def test_parse_timestamp_variants():
    expected = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    assert parse_timestamp("2024-01-02T03:04:05Z") == expected
    assert parse_timestamp("2024-01-02T03:04:05.000Z") == expected
    assert parse_timestamp("2024-01-02T03:04:05+00:00") == expected
    assert parse_timestamp("2024-01-02T05:04:05+02:00") == expected
    assert parse_timestamp(datetime(2024, 1, 2, 3, 4, 5)) == expected
    assert parse_timestamp("2024-01-02") == datetime(2024, 1, 2, tzinfo=timezone.utc)


@pytest.mark.parametrize("value", ["", "yesterday", None, 12345])
def test_parse_timestamp_rejects_garbage(value):
    with pytest.raises(InvalidArgument):
        parse_timestamp(value)


def test_format_timestamp():
    assert format_timestamp(datetime(2024, 1, 15, tzinfo=timezone.utc)) == "2024-01-15T00:00:00Z"


def test_is_within_window_bounds():
    now = datetime(2024, 1, 31, tzinfo=timezone.utc)
    window = timedelta(days=7)
    assert is_within_window(now, window, now)
    assert is_within_window(now - window, window, now)
    assert not is_within_window(now - window - timedelta(seconds=1), window, now)
    assert not is_within_window(now + timedelta(seconds=1), window, now)


def test_observation_from_dict():
    obs = Observation.from_dict({"timestamp": "2024-01-01", "value": 5, "category": "inbound"})
    assert obs.value == 5.0
    assert obs.category == "inbound"
    assert obs.to_dict() == {"timestamp": "2024-01-01", "value": 5.0, "category": "inbound"}


@pytest.mark.parametrize("raw", [
    {"timestamp": "2024-01-01"},
    {"value": 3},
    {"timestamp": "2024-01-01", "value": float("nan")},
    {"timestamp": "not a date", "value": 3},
    {"timestamp": "2024-01-01", "value": True},
])
def test_observation_from_dict_rejects(raw):
    with pytest.raises(InvalidArgument):
        Observation.from_dict(raw)


@pytest.mark.parametrize("raw", ["high", ["timeWindow"], 7])
def test_non_mapping_config_rejected(raw):
    assert validate_config(raw) != []
    with pytest.raises(InvalidArgument):
        AnalyticsConfig.from_dict(raw)


@pytest.mark.parametrize("raw", [5, "abc", None, ["2024-01-01", 3]])
def test_non_mapping_observation_rejected(raw):
    with pytest.raises(InvalidArgument):
        Observation.from_dict(raw)
