"""Logging utilities."""

from .formatting import format_log_line

__all__ = ["format_log_line"]
