"""A single snapshot cycle: copy the source tree into a labelled folder."""

import os
import shutil
import logging
from datetime import datetime
from typing import Callable, List, Optional, Set

from .events import RunState
from .models import BackupConfig, SnapshotRecord
from .size_inspector import SizeInspector

SNAPSHOT_PREFIX = "Backup "


def make_label(now: datetime) -> str:
    """Build the legacy snapshot stamp, e.g. "7 October 03-05 PM".

    Day of month without padding, month name and a 12-hour clock with
    minute precision. The month name and AM/PM marker follow the process
    LC_TIME locale (see ``apply_time_locale``); without it they are
    English. The hour and minute are joined with a dash so the label stays
    a valid folder name on every platform.
    """
    return f"{now.day} {now.strftime('%B')} {now.strftime('%I-%M %p')}"


class SnapshotTask:
    """Copies the source directory into a new timestamped snapshot folder."""

    def __init__(self, config: BackupConfig, state: RunState,
                 inspector: Optional[SizeInspector] = None,
                 clock: Callable[[], datetime] = datetime.now):
        self.config = config
        self.state = state
        self.inspector = inspector or SizeInspector()
        self.clock = clock
        self.logger = logging.getLogger(__name__)

    def run(self) -> SnapshotRecord:
        """Run one cycle and apply its outcome to the run state.

        Never raises: any error is logged and counted as a failure, a
        partly written snapshot is removed, and the backup folder size is
        left as it was.
        """
        label = make_label(self.clock())
        destination = os.path.join(self.config.backup_dir, SNAPSHOT_PREFIX + label)
        existed = os.path.lexists(destination)

        try:
            self._copy_tree(self.config.source_dir, destination)
        except Exception as e:
            self.logger.error(f"Snapshot '{label}' failed: {e!r}")
            if not existed:
                self._discard(destination)
            self.state.record_failure()
            return SnapshotRecord(label=label, succeeded=False,
                                  destination=destination, error_message=str(e) or repr(e))

        self.logger.info(f"Snapshot '{label}' written to {destination}")
        self.state.record_success()

        try:
            size_text = self.inspector.display_size(self.config.backup_dir)
        except Exception as e:
            self.logger.warning(f"Could not measure {self.config.backup_dir}: {e!r}")
            size_text = None
        if size_text is not None:
            self.state.set_folder_size(size_text)

        return SnapshotRecord(label=label, succeeded=True, destination=destination)

    def _copy_tree(self, source: str, destination: str) -> None:
        if not os.path.isdir(source):
            raise FileNotFoundError(f"Source directory not found: {source}")

        # Same-minute labels collide; an existing snapshot is never merged into
        if os.path.lexists(destination):
            raise FileExistsError(f"Snapshot folder already exists: {destination}")

        shutil.copytree(source, destination, symlinks=True,
                        ignore=self._skip_backup_dir(destination))

    def _discard(self, destination: str) -> None:
        if not os.path.isdir(destination):
            return
        try:
            shutil.rmtree(destination, ignore_errors=True)
        except Exception as e:
            self.logger.warning(f"Could not remove partial snapshot {destination}: {e!r}")

    def _skip_backup_dir(self, destination: str) -> Callable[[str, List[str]], Set[str]]:
        """Build a copytree filter that leaves out the backup folder.

        The backup folder may live inside the source folder (the default
        settings put ~/Documents/DataBackup under ~/Documents).
        """
        excluded = {os.path.realpath(self.config.backup_dir), os.path.realpath(destination)}

        def ignore(directory: str, names: List[str]) -> Set[str]:
            return {name for name in names
                    if os.path.realpath(os.path.join(directory, name)) in excluded}

        return ignore
