"""Core backup scheduling functionality."""

from .events import RunState, RunStateEvent
from .models import BackupConfig, Interval, SnapshotRecord
from .scheduler import BackupScheduler, PeriodicActivity
from .size_inspector import SizeInspector
from .snapshot_task import SnapshotTask

__all__ = [
    "BackupConfig", "BackupScheduler", "Interval", "PeriodicActivity", "RunState",
    "RunStateEvent", "SizeInspector", "SnapshotRecord", "SnapshotTask",
]
