"""
Periodic "live" re-evaluation of analytics.
The engine is synchronous; this driver owns timing, overlap handling and cancellation.
"""

import asyncio
import inspect
from typing import Any, Awaitable, Callable, Dict, Iterable, Optional
from datetime import datetime
from analytics.config import AnalyticsConfig
from analytics.engine import AnalyticsEngine
from analytics.models import AnalysisResult
from logger import get_logger


async def _maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


class TaskScheduler:
    """Simple task scheduler that never runs two instances of one job at once."""

    def __init__(self):
        self.tasks: Dict[str, asyncio.Task] = {}
        self.jobs: Dict[str, Dict] = {}
        self.logger = get_logger("scheduler")

    async def _execute(self, job_id: str):
        job = self.jobs[job_id]
        try:
            self.logger.info(f"Running scheduled job: {job_id}")
            job["last_run"] = datetime.utcnow()
            await job["func"]()
            job["runs"] += 1
        except asyncio.CancelledError:
            raise
        except Exception as e:
            job["errors"] += 1
            self.logger.error(f"Error in scheduled job {job_id}: {e}")

    def trigger(self, job_id: str) -> bool:
        """
        Start one run of a job now.

        Returns:
            False if the job is unknown or its previous run is still in progress
        """
        job = self.jobs.get(job_id)
        if job is None:
            return False
        current = job["current"]
        if current is not None and not current.done():
            job["skipped"] += 1
            self.logger.debug(f"Skipping {job_id}: previous run still in progress")
            return False
        job["current"] = asyncio.create_task(self._execute(job_id))
        return True

    async def schedule_periodic(
        self,
        job_id: str,
        func: Callable[[], Awaitable[Any]],
        interval_seconds: float,
        start_immediately: bool = False
    ):
        """
        Schedule a periodic task.

        Args:
            job_id: Unique job identifier
            func: Async function to execute
            interval_seconds: Interval between executions
            start_immediately: Whether to run immediately
        """
        if interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be positive, got {interval_seconds}")
        if job_id in self.tasks:
            self.logger.warning(f"Job {job_id} already scheduled, cancelling previous")
            self.cancel_job(job_id)

        self.jobs[job_id] = {
            "func": func,
            "interval": interval_seconds,
            "last_run": None,
            "current": None,
            "runs": 0,
            "errors": 0,
            "skipped": 0,
        }

        async def run_periodic():
            if not start_immediately:
                await asyncio.sleep(interval_seconds)

            while True:
                self.trigger(job_id)
                await asyncio.sleep(interval_seconds)

        self.tasks[job_id] = asyncio.create_task(run_periodic())
        self.logger.info(f"Scheduled job: {job_id} (interval: {interval_seconds}s)")

    async def schedule_analysis(
        self,
        job_id: str,
        engine: AnalyticsEngine,
        load_observations: Callable[[], Any],
        config: AnalyticsConfig,
        interval_seconds: float,
        on_result: Callable[[AnalysisResult], Any],
        start_immediately: bool = True
    ):
        """
        Re-run the engine periodically over freshly loaded observations.

        Args:
            job_id: Unique job identifier
            engine: Engine to run
            load_observations: Sync or async callable returning observations
            config: Configuration for every run
            interval_seconds: Interval between runs
            on_result: Sync or async callable receiving each AnalysisResult
            start_immediately: Whether to run immediately
        """
        async def run_analysis():
            observations: Iterable = await _maybe_await(load_observations())
            result = engine.analyze(observations, config)
            await _maybe_await(on_result(result))

        await self.schedule_periodic(job_id, run_analysis, interval_seconds, start_immediately)

    def cancel_job(self, job_id: str):
        """Cancel a scheduled job and any run in progress."""
        if job_id in self.tasks:
            self.tasks[job_id].cancel()
            del self.tasks[job_id]
            current = self.jobs[job_id]["current"]
            if current is not None:
                current.cancel()
            del self.jobs[job_id]
            self.logger.info(f"Cancelled job: {job_id}")

    async def shutdown(self):
        """Cancel every job and wait for the tasks to finish."""
        pending = list(self.tasks.values())
        pending += [job["current"] for job in self.jobs.values() if job["current"] is not None]
        for job_id in list(self.tasks):
            self.cancel_job(job_id)
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    def get_job_status(self, job_id: str) -> Optional[Dict]:
        """Get status of a job."""
        if job_id not in self.jobs:
            return None

        job = self.jobs[job_id]
        return {
            "job_id": job_id,
            "interval": job["interval"],
            "last_run": job["last_run"].isoformat() if job["last_run"] else None,
            "running": job_id in self.tasks and not self.tasks[job_id].done(),
            "in_progress": job["current"] is not None and not job["current"].done(),
            "runs": job["runs"],
            "errors": job["errors"],
            "skipped": job["skipped"],
        }


# Global scheduler
_global_scheduler = TaskScheduler()


def get_scheduler() -> TaskScheduler:
    """Get global scheduler."""
    return _global_scheduler
