"""
Tests for metrics collection and health reporting.
"""

from health import HealthChecker
from metrics import MetricsCollector, Timer


def test_timer_records_duration():
    metrics = MetricsCollector()
    with Timer("work", collector=metrics) as timer:
        sum(range(100))
    assert timer.duration is not None
    assert metrics.get_timing_stats("work")["count"] == 1


def test_history_is_bounded():
    metrics = MetricsCollector(max_history=5)
    for _ in range(10):
        metrics.increment("analytics.runs")
    assert len(metrics.get_all_metrics()) == 5
    assert metrics.get_counter("analytics.runs") == 10


def test_health_without_runs():
    report = HealthChecker(MetricsCollector()).check_all()
    assert report["status"] == "healthy"
    assert report["checks"][0]["message"] == "No analyses yet"


def test_health_degrades_with_errors():
    metrics = MetricsCollector()
    metrics.increment("analytics.runs", 1)
    metrics.increment("analytics.errors", 3)
    assert HealthChecker(metrics).check_all()["status"] == "unhealthy"

    metrics.clear()
    metrics.increment("analytics.runs", 7)
    metrics.increment("analytics.errors", 3)
    assert HealthChecker(metrics).check_all()["status"] == "degraded"


def test_slow_analyses_degrade():
    metrics = MetricsCollector()
    metrics.increment("analytics.runs")
    metrics.record_timing("analytics.analyze", 5.0)
    report = HealthChecker(metrics).check_all()
    assert report["status"] == "degraded"


def test_timer_samples_are_bounded():
    metrics = MetricsCollector(max_history=10)
    for i in range(100):
        metrics.record_timing("analytics.analyze", float(i))
    stats = metrics.get_timing_stats("analytics.analyze")
    assert stats["count"] == 10
    assert stats["min"] == 90.0
    assert len(metrics.get_all_metrics()) == 10
