"""
Metrics collection for the Stockwise analytics service.
Tracks analysis run counts, detected findings and run durations.
"""

from typing import Deque, Dict, List, Optional
from dataclasses import dataclass, field
from datetime import datetime
import time
from collections import defaultdict, deque
import threading


@dataclass
class Metric:
    """Single metric value with timestamp."""
    name: str
    value: float
    timestamp: datetime = field(default_factory=datetime.utcnow)
    tags: Dict[str, str] = field(default_factory=dict)


class MetricsCollector:
    """Thread-safe metrics collector."""

    def __init__(self, max_history: int = 10000):
        self.max_history = max_history
        self._metrics: List[Metric] = []
        self._counters: Dict[str, int] = defaultdict(int)
        # per-timer samples keep only the most recent max_history durations
        self._timers: Dict[str, Deque[float]] = defaultdict(lambda: deque(maxlen=self.max_history))
        self._lock = threading.Lock()

    def _append(self, metric: Metric):
        self._metrics.append(metric)
        if len(self._metrics) > self.max_history:
            del self._metrics[:len(self._metrics) - self.max_history]

    def increment(self, name: str, value: int = 1, tags: Optional[Dict[str, str]] = None):
        """Increment a counter metric."""
        with self._lock:
            self._counters[name] += value
            self._append(Metric(name=name, value=float(value), tags=tags or {}))

    def record_timing(self, name: str, duration: float, tags: Optional[Dict[str, str]] = None):
        """Record a timing metric."""
        with self._lock:
            self._timers[name].append(duration)
            self._append(Metric(name=name, value=duration, tags=tags or {}))

    def get_counter(self, name: str) -> int:
        """Get current counter value."""
        with self._lock:
            return self._counters.get(name, 0)

    def _timing_stats(self, name: str) -> Optional[Dict[str, float]]:
        timings = self._timers.get(name, [])
        if not timings:
            return None

        return {
            "count": len(timings),
            "mean": sum(timings) / len(timings),
            "min": min(timings),
            "max": max(timings),
            "sum": sum(timings)
        }

    def get_timing_stats(self, name: str) -> Optional[Dict[str, float]]:
        """Get timing statistics (mean, min, max, count)."""
        with self._lock:
            return self._timing_stats(name)

    def get_all_metrics(self, limit: int = 1000) -> List[Metric]:
        """Get recent metrics."""
        with self._lock:
            return self._metrics[-limit:]

    def clear(self):
        """Clear all metrics."""
        with self._lock:
            self._metrics.clear()
            self._counters.clear()
            self._timers.clear()

    def get_summary(self) -> Dict:
        """Get summary of all metrics."""
        with self._lock:
            summary = {
                "counters": dict(self._counters),
                "timers": {}
            }

            for name in self._timers:
                stats = self._timing_stats(name)
                if stats:
                    summary["timers"][name] = stats

            return summary


# Global metrics collector
_global_metrics = MetricsCollector()


def get_metrics() -> MetricsCollector:
    """Get global metrics collector."""
    return _global_metrics


class Timer:
    """Context manager for timing operations."""

    def __init__(self, name: str, tags: Optional[Dict[str, str]] = None,
                 collector: Optional[MetricsCollector] = None):
        self.name = name
        self.tags = tags
        self.collector = collector or _global_metrics
        self.start_time: Optional[float] = None
        self.duration: Optional[float] = None

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.start_time is not None:
            self.duration = time.perf_counter() - self.start_time
            self.collector.record_timing(self.name, self.duration, self.tags)
