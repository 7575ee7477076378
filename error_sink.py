"""ErrorSink — best-effort, never-throw append-only error log.

The tool runs hidden from a scheduled task, so a failure to record an error
must never become an error of its own.  Failures here only reach the
diagnostic logger.
"""

import logging
from datetime import datetime
from pathlib import Path

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

logger = logging.getLogger(__name__)


def format_timestamp(now: datetime) -> str:
    return now.strftime(TIMESTAMP_FORMAT)


def format_error_line(user: str, message: str, now: datetime | None = None) -> str:
    """Build an ``[<timestamp>] - <user> - <message>`` line."""
    now = now or datetime.now()
    return f"[{format_timestamp(now)}] - {user} - {message}"


def record(path: Path, message: str) -> None:
    """Append message plus a line terminator to path, creating its folder first.

    Best-effort: never raises.
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("a", encoding="utf-8") as f:
            f.write(message + "\n")
    except Exception:
        logger.warning("Could not write to error log %s", path, exc_info=True)


def record_error(path: Path, user: str, message: str, now: datetime | None = None) -> None:
    record(path, format_error_line(user, message, now))
