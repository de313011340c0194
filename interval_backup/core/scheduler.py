"""Lifecycle of a scheduled backup run."""

import os
import time
import logging
import threading
from typing import Callable, List, Optional

from .events import RunState
from .models import BackupConfig
from .size_inspector import SizeInspector
from .snapshot_task import SnapshotTask

TICKER_PERIOD_SECONDS = 1.0


class PeriodicActivity:
    """Runs an action on its own thread at a fixed rate.

    Nominal firing times are ``start + k * period`` for k >= 1, so the
    first run happens one full period after ``start()``. Runs never
    overlap. When a run overruns, the missed slots are either executed
    back to back (``catch_up=True``) or skipped.
    """

    def __init__(self, name: str, action: Callable[[], object], period: float,
                 catch_up: bool = False):
        if period <= 0:
            raise ValueError(f"Period must be positive, got {period}")
        self.name = name
        self.action = action
        self.period = period
        self.catch_up = catch_up
        self.logger = logging.getLogger(__name__)
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self._thread is not None:
            raise RuntimeError(f"Activity '{self.name}' already started")
        self._thread = threading.Thread(target=self._run, name=self.name, daemon=True)
        self._thread.start()

    def stop(self) -> None:
        """Cancel the schedule and wait for an in-flight run to finish."""
        self.cancel()
        self.join()

    def cancel(self) -> None:
        """Prevent further runs without waiting for the current one."""
        self._stop_event.set()

    def join(self) -> None:
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join()

    @property
    def owns_current_thread(self) -> bool:
        return self._thread is threading.current_thread()

    def _run(self) -> None:
        next_run = time.monotonic() + self.period
        while not self._stop_event.wait(max(0.0, next_run - time.monotonic())):
            try:
                self.action()
            except Exception:
                self.logger.exception(f"Activity '{self.name}' raised, schedule continues")

            next_run += self.period
            now = time.monotonic()
            if not self.catch_up and next_run < now:
                skipped = int((now - next_run) // self.period) + 1
                self.logger.warning(f"Activity '{self.name}' overran, skipping {skipped} run(s)")
                next_run += skipped * self.period


class BackupScheduler:
    """Owns the snapshot schedule and the elapsed-time ticker of a run.

    Args:
        state: Run state to publish into. A new one is created if omitted.
        inspector: Size calculator shared with the snapshot task.
        clock_scale: Multiplier applied to every period; 1.0 is real time.
    """

    def __init__(self, state: Optional[RunState] = None,
                 inspector: Optional[SizeInspector] = None,
                 clock_scale: float = 1.0):
        self.state = state or RunState()
        self.inspector = inspector or SizeInspector()
        self.clock_scale = clock_scale
        self.logger = logging.getLogger(__name__)
        self.config: Optional[BackupConfig] = None
        self._snapshot_activity: Optional[PeriodicActivity] = None
        self._ticker_activity: Optional[PeriodicActivity] = None
        self._run_activities: List[PeriodicActivity] = []
        self._lifecycle_lock = threading.RLock()

    @property
    def is_running(self) -> bool:
        return self._snapshot_activity is not None

    def start(self, config: BackupConfig) -> None:
        """Begin a run: snapshot every interval and tick once per second.

        Raises:
            RuntimeError: If a run is already active.
        """
        with self._lifecycle_lock:
            if self.is_running:
                raise RuntimeError("Backup run already in progress")
            if self._run_activities:
                self._finish_stop(self._run_activities)

            self.config = config
            self._ensure_backup_dir(config.backup_dir)

            size_text = self.inspector.display_size(config.backup_dir)
            if size_text is not None:
                self.state.set_folder_size(size_text)

            task = SnapshotTask(config, self.state, inspector=self.inspector)
            self._snapshot_activity = PeriodicActivity(
                "snapshot", task.run, config.interval.seconds * self.clock_scale)
            self._ticker_activity = PeriodicActivity(
                "elapsed-ticker", self.state.tick, TICKER_PERIOD_SECONDS * self.clock_scale,
                catch_up=True)

            self._run_activities = [self._snapshot_activity, self._ticker_activity]
            self._snapshot_activity.start()
            self._ticker_activity.start()

            self.logger.info(
                f"Backup run started: {config.source_dir} -> {config.backup_dir} "
                f"every {config.interval.minutes} minutes")

    def stop(self) -> None:
        """End the run and reset the run state. Does nothing when idle.

        Called from a subscriber running on one of the run's own threads,
        the schedules are cancelled at once and the join and reset finish
        on a helper thread after that subscriber returns.
        """
        on_run_thread = any(a.owns_current_thread for a in self._run_activities)
        if not self._lifecycle_lock.acquire(blocking=not on_run_thread):
            # Another thread is already stopping this run and joining this one
            return
        try:
            if not self.is_running:
                self.logger.debug("Stop requested while idle, ignoring")
                return

            activities = self._run_activities
            self._snapshot_activity = None
            self._ticker_activity = None
            for activity in activities:
                activity.cancel()

            if on_run_thread:
                threading.Thread(target=self._finish_deferred_stop, args=(activities,),
                                 name="backup-stop", daemon=True).start()
                return

            self._finish_stop(activities)
        finally:
            self._lifecycle_lock.release()

    def _finish_deferred_stop(self, activities: List[PeriodicActivity]) -> None:
        with self._lifecycle_lock:
            # A start() in between has already finished this stop
            if self._run_activities is activities:
                self._finish_stop(activities)

    def _finish_stop(self, activities: List[PeriodicActivity]) -> None:
        # Both schedules must be halted before the reset
        for activity in activities:
            activity.join()
        self._run_activities = []
        self.state.reset()
        self.logger.info("Backup run stopped")

    def _ensure_backup_dir(self, backup_dir: str) -> None:
        if os.path.exists(backup_dir):
            return
        try:
            os.makedirs(backup_dir)
            self.logger.info(f"Created backup directory {backup_dir}")
        except OSError as e:
            self.logger.error(f"Could not create backup directory {backup_dir}: {e}")
