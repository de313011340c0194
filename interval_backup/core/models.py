"""Data models for scheduled backups."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class Interval(Enum):
    """Supported snapshot intervals, valued in milliseconds."""
    TEN = 600000
    TWENTY = 1200000
    THIRTY = 1800000
    FORTY = 2400000
    FIFTY = 3000000
    SIXTY = 3600000
    ONE_HUNDRED_TWENTY = 7200000

    @property
    def millis(self) -> int:
        return self.value

    @property
    def seconds(self) -> float:
        return self.value / 1000

    @property
    def minutes(self) -> int:
        return self.value // 60000

    @classmethod
    def from_value(cls, value: Union["Interval", str, int]) -> "Interval":
        """Resolve an interval from its name ("TEN") or its length in minutes.

        Raises:
            ValueError: If the value does not name a supported interval.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            text = value.strip()
            if text.upper() in cls.__members__:
                return cls[text.upper()]
            if not text.isdigit():
                raise ValueError(f"Unknown interval: {value}")
            value = int(text)
        if isinstance(value, int) and not isinstance(value, bool):
            for interval in cls:
                if interval.minutes == value:
                    return interval
        raise ValueError(f"Unknown interval: {value}")


@dataclass(frozen=True)
class BackupConfig:
    """Settings of a single backup run."""
    source_dir: str
    backup_dir: str
    interval: Interval = Interval.TEN

    def __post_init__(self):
        if not self.source_dir:
            raise ValueError("Source directory cannot be empty")
        if not self.backup_dir:
            raise ValueError("Backup directory cannot be empty")
        if not isinstance(self.interval, Interval):
            raise ValueError(f"Invalid interval: {self.interval!r}")


@dataclass
class SnapshotRecord:
    """Outcome of one snapshot cycle."""
    label: str
    succeeded: bool
    destination: Optional[str] = None
    error_message: Optional[str] = None
