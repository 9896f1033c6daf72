"""
Tests for periodic re-evaluation.
"""

import asyncio
from analytics.config import AnalyticsConfig
from analytics.engine import AnalyticsEngine
from jobs.scheduler import TaskScheduler
from metrics import MetricsCollector
from conftest import daily


def test_schedule_analysis_delivers_results():
    results = []

    async def scenario():
        scheduler = TaskScheduler()
        engine = AnalyticsEngine(seed=1, metrics=MetricsCollector())

        async def load():
            return daily([100] * 10)

        await scheduler.schedule_analysis(
            "live", engine, load, AnalyticsConfig(time_window="1y"), 0.01, results.append
        )
        await asyncio.sleep(0.05)
        status = scheduler.get_job_status("live")
        await scheduler.shutdown()
        return status

    status = asyncio.run(scenario())
    assert len(results) >= 1
    assert status["runs"] >= 1
    assert status["errors"] == 0


def test_overlapping_runs_are_skipped():
    started = []

    async def scenario():
        scheduler = TaskScheduler()

        async def slow_job():
            started.append(1)
            await asyncio.sleep(0.2)

        await scheduler.schedule_periodic("slow", slow_job, 0.01, start_immediately=True)
        await asyncio.sleep(0.08)
        status = scheduler.get_job_status("slow")
        await scheduler.shutdown()
        return status

    status = asyncio.run(scenario())
    assert len(started) == 1
    assert status["skipped"] >= 1
    assert status["in_progress"] is True


def test_failing_job_keeps_running():
    async def scenario():
        scheduler = TaskScheduler()

        async def broken():
            raise RuntimeError("boom")

        await scheduler.schedule_periodic("broken", broken, 0.01, start_immediately=True)
        await asyncio.sleep(0.05)
        status = scheduler.get_job_status("broken")
        await scheduler.shutdown()
        return status

    status = asyncio.run(scenario())
    assert status["errors"] >= 2
    assert status["running"] is True


def test_cancel_job():
    async def scenario():
        scheduler = TaskScheduler()

        async def noop():
            return None

        await scheduler.schedule_periodic("noop", noop, 10)
        scheduler.cancel_job("noop")
        return scheduler.get_job_status("noop"), scheduler.trigger("noop")

    status, triggered = asyncio.run(scenario())
    assert status is None
    assert triggered is False
