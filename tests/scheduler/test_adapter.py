from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.date import DateTrigger
from apscheduler.triggers.interval import IntervalTrigger

from release_tracker.config import ScheduleConfig, ScheduleType
from release_tracker.scheduler import SCAN_JOB_ID, APSchedulerAdapter


def test_build_triggers() -> None:
    adapter = APSchedulerAdapter()
    assert isinstance(adapter._build_trigger(ScheduleConfig()), CronTrigger)

    interval = adapter._build_trigger(ScheduleConfig(type=ScheduleType.INTERVAL, value=30))
    assert isinstance(interval, IntervalTrigger)
    assert interval.interval.total_seconds() == 30

    kwargs_interval = adapter._build_trigger(
        ScheduleConfig(type=ScheduleType.INTERVAL, value={"minutes": 2})
    )
    assert kwargs_interval.interval.total_seconds() == 120

    future = (datetime.now(timezone.utc) + timedelta(minutes=5)).isoformat()
    once = adapter._build_trigger(ScheduleConfig(type=ScheduleType.ONCE, value=future))
    assert isinstance(once, DateTrigger)


def test_interval_rejects_strings() -> None:
    with pytest.raises(ValueError):
        ScheduleConfig(type=ScheduleType.INTERVAL, value="fast")


def test_scan_job_never_overlaps() -> None:
    adapter = APSchedulerAdapter()
    calls: list[dict] = []

    class StubScheduler:
        def add_job(self, callback, **kwargs):  # noqa: ANN001
            calls.append({"callback": callback, **kwargs})

        def start(self):
            calls.append({"event": "started"})

        def shutdown(self, wait=False):  # noqa: ARG002
            calls.append({"event": "shutdown"})

        def get_jobs(self):
            return []

    adapter.scheduler = StubScheduler()  # type: ignore[assignment]

    def scan() -> None:
        return None

    adapter.schedule_scan(ScheduleConfig(type=ScheduleType.INTERVAL, value=60), scan)
    adapter.start()
    adapter.shutdown()

    job = calls[0]
    assert job["id"] == SCAN_JOB_ID
    assert job["callback"] is scan
    assert job["max_instances"] == 1
    assert job["coalesce"] is True
    assert job["replace_existing"] is True
    assert calls[1:] == [{"event": "started"}, {"event": "shutdown"}]


def test_blocking_mode_uses_blocking_scheduler() -> None:
    assert isinstance(APSchedulerAdapter(blocking=True).scheduler, BlockingScheduler)
