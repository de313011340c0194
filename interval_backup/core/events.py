"""Observable run state for a backup run."""

import logging
import threading
from enum import Enum
from typing import Any, Callable, Dict, List

from ..utils.formatters import format_elapsed


class RunStateEvent(Enum):
    """Fields of the run state that observers are notified about."""
    SUCCESS_COUNT = "successCount"
    FAILURE_COUNT = "failureCount"
    ELAPSED = "elapsed"
    FOLDER_SIZE = "backupFolderSize"


Subscriber = Callable[[RunStateEvent, Any], None]


class RunState:
    """Counters and display strings of the current run.

    Every field change is published to all subscribers as
    ``(event, value)``. Delivery is synchronous and serialized, so events
    of the same type reach each subscriber in the order they were emitted.
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)
        self._subscribers: List[Subscriber] = []
        self._publish_lock = threading.RLock()
        self.success_count = 0
        self.failure_count = 0
        self.elapsed_seconds = 0
        self.backup_folder_size = ""

    @property
    def elapsed_text(self) -> str:
        return format_elapsed(self.elapsed_seconds)

    def subscribe(self, callback: Subscriber) -> None:
        with self._publish_lock:
            if callback not in self._subscribers:
                self._subscribers.append(callback)

    def unsubscribe(self, callback: Subscriber) -> None:
        with self._publish_lock:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

    def record_success(self) -> None:
        with self._publish_lock:
            self.success_count += 1
            self._publish(RunStateEvent.SUCCESS_COUNT, self.success_count)

    def record_failure(self) -> None:
        with self._publish_lock:
            self.failure_count += 1
            self._publish(RunStateEvent.FAILURE_COUNT, self.failure_count)

    def tick(self) -> str:
        """Advance the elapsed time by one second and publish it."""
        with self._publish_lock:
            self.elapsed_seconds += 1
            elapsed = self.elapsed_text
            self._publish(RunStateEvent.ELAPSED, elapsed)
        return elapsed

    def set_folder_size(self, size_text: str) -> None:
        with self._publish_lock:
            self.backup_folder_size = size_text
            self._publish(RunStateEvent.FOLDER_SIZE, size_text)

    def reset(self) -> None:
        """Restore defaults and publish each of them."""
        with self._publish_lock:
            self.success_count = 0
            self._publish(RunStateEvent.SUCCESS_COUNT, 0)
            self.failure_count = 0
            self._publish(RunStateEvent.FAILURE_COUNT, 0)
            self.elapsed_seconds = 0
            self._publish(RunStateEvent.ELAPSED, self.elapsed_text)
            self.backup_folder_size = ""
            self._publish(RunStateEvent.FOLDER_SIZE, "")

    def snapshot(self) -> Dict[str, Any]:
        """Current values keyed by event name."""
        with self._publish_lock:
            return {
                RunStateEvent.SUCCESS_COUNT.value: self.success_count,
                RunStateEvent.FAILURE_COUNT.value: self.failure_count,
                RunStateEvent.ELAPSED.value: self.elapsed_text,
                RunStateEvent.FOLDER_SIZE.value: self.backup_folder_size,
            }

    def _publish(self, event: RunStateEvent, value: Any) -> None:
        for callback in list(self._subscribers):
            try:
                callback(event, value)
            except Exception as e:
                self.logger.error(f"Subscriber {callback!r} failed on {event.name}: {e}")
