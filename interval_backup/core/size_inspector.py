"""Directory size calculation for backup folders."""

import os
import logging
from typing import Optional

from ..utils.formatters import format_size_mb


class SizeInspector:
    """Computes the total size of a directory tree."""

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def total_bytes(self, path: str) -> Optional[int]:
        """Sum the sizes of all regular files below a path.

        Entries that cannot be read are skipped with a warning and count
        as zero. A symlinked root is measured at its target; links below
        the root are not followed.

        Args:
            path: File or directory to measure.

        Returns:
            Total size in bytes, or None if the path does not exist.
        """
        if not os.path.lexists(path):
            return None

        target = os.path.realpath(path)
        try:
            if not os.path.isdir(target):
                return os.stat(target).st_size
        except OSError as e:
            # Dangling root link or a file removed in the meantime
            self.logger.warning(f"Skipping {path}: {e}")
            return 0

        return self._directory_size(target)

    def display_size(self, path: str) -> Optional[str]:
        """Return the size of a path as a display string like "512.00 MB".

        Returns:
            Formatted size, or None if the path does not exist.
        """
        size_bytes = self.total_bytes(path)
        if size_bytes is None:
            return None
        return format_size_mb(size_bytes)

    def _directory_size(self, directory_path: str) -> int:
        total_size = 0

        try:
            entries = list(os.scandir(directory_path))
        except OSError as e:
            self.logger.warning(f"Skipping directory {directory_path}: {e}")
            return 0

        for entry in entries:
            try:
                if entry.is_dir(follow_symlinks=False):
                    total_size += self._directory_size(entry.path)
                elif entry.is_file(follow_symlinks=False):
                    total_size += entry.stat(follow_symlinks=False).st_size
            except OSError as e:
                # Deleted or unreadable since the listing
                self.logger.warning(f"Skipping {entry.path}: {e}")
                continue

        return total_size
