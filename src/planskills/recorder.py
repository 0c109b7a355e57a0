"""Load recording — one timestamped log file per load."""

from __future__ import annotations

import logging
import os
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from . import LOG_DIRNAME
from .models import DEFAULT_MAX_LINES

logger = logging.getLogger("planskills.recorder")


class LogWriteFailure(OSError):
    """A load record could not be written. Reported, never fatal."""


def default_log_dir() -> Path:
    """Resolve the log directory, respecting PLANSKILLS_LOG_DIR."""
    env = os.environ.get("PLANSKILLS_LOG_DIR")
    if env:
        return Path(env).expanduser()
    return Path.cwd() / LOG_DIRNAME


def format_record(
    plan_path: str,
    loaded_ids: list[str],
    total_lines: int,
    max_total_lines: int,
    timestamp: str,
) -> str:
    loaded = ", ".join(loaded_ids) or "none"
    return (
        f"[{timestamp}] Plan: {plan_path}\n"
        f"[{timestamp}] Skills loaded: {loaded} ({total_lines} lines)\n"
        f"[{timestamp}] Total: {total_lines} lines / {max_total_lines} max\n"
    )


def write_record(log_file: Path, entry: str) -> Path:
    """Write one record, creating its directory first.

    Raises:
        LogWriteFailure: If the directory or file can't be written.
    """
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        log_file.write_text(entry, encoding="utf-8")
    except OSError as exc:
        raise LogWriteFailure(f"Could not write skills log {log_file}: {exc}") from exc
    return log_file


def record_load(
    plan_path: str | Path,
    loaded_ids: list[str],
    total_lines: int,
    log_dir: Optional[Path] = None,
    max_total_lines: Optional[int] = None,
) -> Optional[Path]:
    """Write a record of what was loaded for a plan.

    Files are named ``skills_<epoch-ms>.log``; two loads in the same
    millisecond overwrite each other.

    Args:
        plan_path: The plan the skills were loaded for.
        loaded_ids: Identifiers actually loaded, in order.
        total_lines: Combined line count.
        log_dir: Destination directory (default: default_log_dir()).
        max_total_lines: Budget to report alongside the total.

    Returns:
        Path of the log file, or None if it couldn't be written.
    """
    log_dir = log_dir or default_log_dir()
    timestamp = datetime.now(timezone.utc).isoformat(timespec="milliseconds")
    log_file = log_dir / f"skills_{time.time_ns() // 1_000_000}.log"
    entry = format_record(
        str(plan_path),
        loaded_ids,
        total_lines,
        max_total_lines if max_total_lines is not None else DEFAULT_MAX_LINES,
        timestamp,
    )

    try:
        write_record(log_file, entry)
    except LogWriteFailure as exc:
        logger.error("%s", exc)
        return None

    logger.debug("Recorded skills load: %s", log_file)
    return log_file
