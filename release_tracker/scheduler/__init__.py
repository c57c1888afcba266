"""Scheduler integration."""

from .apsched_adapter import APSchedulerAdapter, SCAN_JOB_ID

__all__ = ["APSchedulerAdapter", "SCAN_JOB_ID"]
