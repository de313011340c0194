"""Utility modules for scheduled backups."""

from .formatters import apply_time_locale, format_elapsed, format_size_mb

__all__ = ["apply_time_locale", "format_elapsed", "format_size_mb"]
