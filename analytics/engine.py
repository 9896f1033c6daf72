"""
Analytics engine facade.
Windows the observations, then runs trend, anomaly, forecast and insight
components and summarizes the window.
"""

import random
from datetime import datetime
from typing import Any, Callable, Iterable, List, Mapping, Optional, Union
from analytics.anomaly import detect_anomalies
from analytics.config import AnalyticsConfig, DEFAULT_CONFIG
from analytics.forecast import generate_forecast
from analytics.insights import generate_insights
from analytics.models import AnalysisMetrics, AnalysisResult, Insight, Observation
from analytics.stats import standard_deviation
from analytics.trend import detect_trend, insufficient_trend
from validators import ValidationError, is_within_window, parse_timestamp, utc_now
from metrics import MetricsCollector, Timer, get_metrics
from logger import get_logger

InsightSink = Callable[[Insight], None]
ObservationInput = Union[Observation, Mapping[str, Any]]


def coerce_observations(observations: Iterable[ObservationInput]) -> List[Observation]:
    """Accept Observation instances or plain mappings."""
    return [
        o if isinstance(o, Observation) else Observation.from_dict(o)
        for o in observations
    ]


def window_metrics(values: List[float]) -> AnalysisMetrics:
    if not values:
        return AnalysisMetrics()
    total = sum(values)
    spread = standard_deviation(values)
    return AnalysisMetrics(
        total=total,
        average=total / len(values),
        min=min(values),
        max=max(values),
        variance=spread,
        std_dev=spread,
        count=len(values),
    )


def empty_result() -> AnalysisResult:
    """Zero-valued bundle returned when the window holds no observations."""
    return AnalysisResult(trend=insufficient_trend("No data"))


class AnalyticsEngine:
    """Stateless entry point used by the dashboard and the HTTP adapter."""

    def __init__(self, seed: Optional[int] = None, metrics: Optional[MetricsCollector] = None):
        """
        Args:
            seed: Seed for forecast noise; with a seed, identical inputs give
                identical forecasts
            metrics: Collector for run counters and timings (defaults to global)
        """
        self.seed = seed
        self.metrics = metrics or get_metrics()
        self.logger = get_logger("engine")

    def _noise_source(self) -> random.Random:
        return random.Random(self.seed) if self.seed is not None else random.Random()

    def filter_window(
        self,
        observations: List[Observation],
        config: AnalyticsConfig,
        now: datetime
    ) -> List[Observation]:
        span = config.time_window.timedelta
        return [o for o in observations if is_within_window(o.time, span, now)]

    def analyze(
        self,
        observations: Iterable[ObservationInput],
        config: Optional[AnalyticsConfig] = None,
        on_insight: Optional[InsightSink] = None,
        now: Optional[Union[datetime, str]] = None
    ) -> AnalysisResult:
        """
        Analyse the configured time window of ``observations``.

        Args:
            observations: Time-ascending observations or mappings
            config: Engine configuration (defaults to DEFAULT_CONFIG)
            on_insight: Called synchronously once per insight, in order
            now: Upper bound of the time window (defaults to current UTC time)

        Returns:
            AnalysisResult bundle

        Raises:
            InvalidArgument: For malformed observations or configuration
        """
        config = config or DEFAULT_CONFIG
        now = parse_timestamp(now) if now is not None else utc_now()

        try:
            with Timer("analytics.analyze", collector=self.metrics):
                result = self._run(coerce_observations(observations), config, now)
        except ValidationError:
            self.metrics.increment("analytics.errors")
            raise

        self.metrics.increment("analytics.runs")
        self.metrics.increment("analytics.anomalies", len(result.anomalies))
        self.metrics.increment("analytics.insights", len(result.insights))

        if on_insight is not None:
            for insight in result.insights:
                on_insight(insight)

        return result

    def _run(self, observations: List[Observation], config: AnalyticsConfig, now: datetime) -> AnalysisResult:
        window = self.filter_window(observations, config, now)
        self.logger.debug(
            f"Window {config.time_window.value}: {len(window)} of {len(observations)} observations"
        )

        if not window:
            self.metrics.increment("analytics.empty_windows")
            self.logger.info(f"No observations in {config.time_window.value} window")
            return empty_result()

        values = [o.value for o in window]
        trend = detect_trend(values)
        anomalies = detect_anomalies(window, config.sensitivity) if config.enable_anomaly_detection else []
        forecast = (
            generate_forecast(window, config.forecast_periods, self._noise_source())
            if config.enable_forecasting else []
        )
        insights = generate_insights(window, anomalies, trend, config, now=now)

        self.logger.info(
            f"Analysed {len(window)} observations: trend={trend.direction.value}/{trend.strength.value}, "
            f"{len(anomalies)} anomalies, {len(forecast)} forecast points, {len(insights)} insights"
        )

        return AnalysisResult(
            trend=trend,
            anomalies=anomalies,
            forecast=forecast,
            insights=insights,
            metrics=window_metrics(values),
        )


def analyze(
    observations: Iterable[ObservationInput],
    config: Optional[AnalyticsConfig] = None,
    on_insight: Optional[InsightSink] = None,
    now: Optional[Union[datetime, str]] = None,
    seed: Optional[int] = None
) -> AnalysisResult:
    """Convenience wrapper around AnalyticsEngine.analyze."""
    return AnalyticsEngine(seed=seed).analyze(observations, config, on_insight=on_insight, now=now)
