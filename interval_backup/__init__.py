"""
Interval Backup - scheduled folder snapshots.

This package copies a source folder into timestamped snapshot folders on a
fixed interval and reports live progress: successful and failed snapshots,
elapsed run time and the size of the backup folder.
"""

__version__ = "1.0.0"

from .core.models import BackupConfig, Interval
from .core.scheduler import BackupScheduler
from .core.size_inspector import SizeInspector

__all__ = ["BackupConfig", "BackupScheduler", "Interval", "SizeInspector"]
