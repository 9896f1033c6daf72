"""
Health check utilities for the Stockwise analytics service.
"""

from typing import Dict, List, Optional
from dataclasses import dataclass
from datetime import datetime
from metrics import MetricsCollector, get_metrics

SLOW_ANALYSIS_SECONDS = 1.0


@dataclass
class HealthCheck:
    """Single health check result."""
    name: str
    status: str  # "healthy", "degraded", "unhealthy"
    message: str
    timestamp: datetime
    details: Optional[Dict] = None


class HealthChecker:
    """Health check manager."""

    def __init__(self, metrics: Optional[MetricsCollector] = None):
        self.metrics = metrics or get_metrics()
        self.checks: List[HealthCheck] = []
        self.last_check_time: Optional[datetime] = None

    def check_all(self) -> Dict:
        """
        Run all health checks.

        Returns:
            Dictionary with overall status and individual checks
        """
        self.checks.clear()
        self.last_check_time = datetime.utcnow()

        summary = self.metrics.get_summary()
        self._check_error_rate(summary)
        self._check_performance(summary)

        if any(c.status == "unhealthy" for c in self.checks):
            overall_status = "unhealthy"
        elif any(c.status == "degraded" for c in self.checks):
            overall_status = "degraded"
        else:
            overall_status = "healthy"

        return {
            "status": overall_status,
            "timestamp": self.last_check_time.isoformat() + "Z",
            "checks": [
                {
                    "name": c.name,
                    "status": c.status,
                    "message": c.message,
                    "details": c.details
                }
                for c in self.checks
            ]
        }

    def _add(self, name: str, status: str, message: str, details: Optional[Dict] = None):
        self.checks.append(HealthCheck(
            name=name,
            status=status,
            message=message,
            timestamp=self.last_check_time,
            details=details
        ))

    def _check_error_rate(self, summary: Dict):
        """Share of analysis calls rejected as invalid input."""
        error_count = summary["counters"].get("analytics.errors", 0)
        run_count = summary["counters"].get("analytics.runs", 0)
        total = error_count + run_count

        if total == 0:
            self._add("analysis_error_rate", "healthy", "No analyses yet")
            return

        error_rate = error_count / total
        details = {"error_rate": error_rate, "total_calls": total}
        if error_rate > 0.5:
            self._add("analysis_error_rate", "unhealthy", f"High error rate: {error_rate:.1%}", details)
        elif error_rate > 0.2:
            self._add("analysis_error_rate", "degraded", f"Elevated error rate: {error_rate:.1%}", details)
        else:
            self._add("analysis_error_rate", "healthy", f"Error rate acceptable: {error_rate:.1%}", details)

    def _check_performance(self, summary: Dict):
        stats = summary["timers"].get("analytics.analyze", {})
        if not stats:
            return
        avg_time = stats.get("mean", 0)
        if avg_time > SLOW_ANALYSIS_SECONDS:
            self._add("analysis_performance", "degraded", f"Slow analyses: {avg_time:.3f}s average", stats)
        else:
            self._add("analysis_performance", "healthy",
                      f"Analysis performance acceptable: {avg_time:.3f}s average", stats)


# Global health checker
_global_health = HealthChecker()


def get_health() -> Dict:
    """Get health status."""
    return _global_health.check_all()
