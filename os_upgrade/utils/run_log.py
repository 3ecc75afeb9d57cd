"""
Per-run log sinks built on loguru.

Each phase run writes timestamped, levelled lines to its own file. The sink
is scoped to a context manager so it is flushed and removed on every exit
path, and a log file that cannot be opened or written never aborts the run.
"""

import sys
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Iterator, Optional

from loguru import logger

from os_upgrade.core.constants import LOG_FILE_FORMAT, LOG_TIMESTAMP_FORMAT

# Levels are written the way the deployment tool's log parser expects them
_LEVEL_TAGS = {"WARNING": "WARN", "CRITICAL": "ERROR", "SUCCESS": "INFO"}


def _tag_level(record) -> bool:
    level_name = record["level"].name
    record["extra"]["level_tag"] = _LEVEL_TAGS.get(level_name, level_name)
    return True


def configure_console_logging(verbose: bool = False) -> None:
    """Route loguru output to stderr; stdout is reserved for JSON events."""
    logger.remove()
    logger.add(
        sys.stderr,
        level="DEBUG" if verbose else "INFO",
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | {message}",
        catch=True,
    )


def build_log_path(log_dir: str, phase: str, now: Optional[datetime] = None) -> Path:
    timestamp = (now or datetime.now()).strftime(LOG_TIMESTAMP_FORMAT)
    return Path(log_dir) / f"{phase}_{timestamp}.log"


@contextmanager
def run_log_sink(log_dir: str, phase: str) -> Iterator[Optional[Path]]:
    """
    Attach a file sink for the duration of one run.

    Args:
        log_dir: Directory that receives the per-run log file
        phase: Phase name used as the file name prefix

    Yields:
        Path of the log file, or None when no file sink could be opened
    """
    log_path = build_log_path(log_dir, phase)
    sink_id = None
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        sink_id = logger.add(
            str(log_path),
            level="INFO",
            format=LOG_FILE_FORMAT,
            filter=_tag_level,
            encoding="utf-8",
            catch=True,
        )
    except (OSError, ValueError) as e:
        logger.warning(f"⚠️ Could not open run log {log_path}: {e}")
        log_path = None

    try:
        yield log_path
    finally:
        if sink_id is not None:
            try:
                logger.remove(sink_id)
            except ValueError:
                # Sink already removed by a console reconfiguration
                pass
