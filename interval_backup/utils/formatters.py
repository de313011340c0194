"""Formatting utilities for backup progress output."""

import locale
import logging
from typing import Optional

logger = logging.getLogger(__name__)

BYTES_PER_MB = 1024 * 1024
GB_THRESHOLD_MB = 1000


def format_size_mb(size_bytes: int) -> str:
    """Format a byte count as megabytes, or gigabytes above 1000 MB.

    The switch to gigabytes happens only when the megabyte value is
    strictly greater than 1000, so exactly 1000 MB still reads "1000.00 MB".

    Args:
        size_bytes: Size in bytes.

    Returns:
        Size string with two decimals and a unit, e.g. "512.00 MB".
    """
    size = size_bytes / BYTES_PER_MB
    unit = "MB"
    if size > GB_THRESHOLD_MB:
        size = size / 1024
        unit = "GB"
    return f"{size:.2f} {unit}"


def format_elapsed(seconds: int) -> str:
    """Format a second count as HH:MM:SS; hours are not wrapped at 24."""
    hours, remainder = divmod(seconds, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def apply_time_locale(language: Optional[str]) -> Optional[str]:
    """Switch LC_TIME to a language tag such as "de" or "en_GB".

    Month names and the AM/PM marker in snapshot labels follow LC_TIME.
    Falls back to the environment's locale when the tag is not installed.

    Returns:
        Name of the locale now in effect, or None if nothing could be set.
    """
    candidates = []
    if language:
        tag = language.replace('-', '_')
        candidates += [tag, f"{tag}.UTF-8", locale.normalize(tag)]
    candidates.append("")

    for candidate in candidates:
        try:
            applied = locale.setlocale(locale.LC_TIME, candidate)
        except locale.Error:
            continue
        if language and candidate == "":
            logger.warning(f"Locale for language '{language}' is not installed, using {applied}")
        return applied

    logger.warning(f"Could not set a time locale for language '{language}'")
    return None
