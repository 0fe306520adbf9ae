"""
Tests for the job registry and manual triggering.
"""

from unittest.mock import AsyncMock

import pytest
from apscheduler.triggers.interval import IntervalTrigger

from app.core import scheduler


@pytest.fixture(autouse=True)
def clean_registry():
    saved = dict(scheduler._job_registry)
    scheduler._job_registry.clear()
    yield
    scheduler._job_registry.clear()
    scheduler._job_registry.update(saved)


class TestRegistry:
    def test_registered_job_listed_as_not_scheduled(self):
        scheduler.register_job("demo", AsyncMock(), IntervalTrigger(hours=1))

        jobs = scheduler.list_registered_jobs()

        assert jobs == [
            {"job_id": "demo", "registered": True, "next_run_time": None, "is_paused": True}
        ]

    @pytest.mark.asyncio
    async def test_start_schedules_registered_jobs(self):
        scheduler.register_job("demo", AsyncMock(), IntervalTrigger(hours=1))

        running = await scheduler.start_scheduler()
        try:
            assert running.get_job("demo") is not None
            assert scheduler.pause_job("demo") is True
            assert scheduler.resume_job("demo") is True
        finally:
            await scheduler.stop_scheduler()


class TestTriggerManually:
    @pytest.mark.asyncio
    async def test_returns_job_result(self):
        scheduler.register_job("demo", AsyncMock(return_value={"n": 1}), IntervalTrigger(hours=1))

        result = await scheduler.trigger_job_manually("demo")

        assert result["status"] == "success"
        assert result["result"] == {"n": 1}

    @pytest.mark.asyncio
    async def test_reports_job_error(self):
        scheduler.register_job(
            "broken", AsyncMock(side_effect=RuntimeError("boom")), IntervalTrigger(hours=1)
        )

        result = await scheduler.trigger_job_manually("broken")

        assert result["status"] == "error"
        assert result["error"] == "boom"

    @pytest.mark.asyncio
    async def test_unknown_job(self):
        with pytest.raises(ValueError):
            await scheduler.trigger_job_manually("missing")
