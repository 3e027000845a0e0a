"""Formatting helpers for log lines written to files."""

import json
from datetime import datetime, timezone
from typing import Any, Optional, Sequence

from ..entities.config import LogLevel


def format_log_line(
    level: LogLevel,
    message: Optional[str],
    args: Sequence[Any] = (),
    timestamp: Optional[datetime] = None
) -> str:
    """Render one newline-terminated log line.
    
    Args:
        level: Severity of the entry
        message: Message text, "Unknown log" when missing
        args: Extra arguments, appended as a JSON array
        timestamp: Entry time, defaults to now in UTC
        
    Returns:
        ``<ISO timestamp> [<LEVEL>] <message>[ <json args>]`` plus newline
    """
    moment = timestamp or datetime.now(timezone.utc)
    line = f"{moment.isoformat()} [{LogLevel(level).value.upper()}] {message if message is not None else 'Unknown log'}"
    
    if args:
        line += " " + json.dumps(list(args), default=str, ensure_ascii=False)
    
    # Keep each entry on a single line.
    return line.replace("\n", "\\n") + "\n"
