"""Logging for the insider tracker.

One named logger, ``insider_tracker``, shared by every module. Messages
carry a bracketed component tag (``[Finnhub]``, ``[Scheduler]``, ...).

- stdout at ``LOG_LEVEL`` (INFO by default)
- ``insider_tracker_<timestamp>.log`` per server start, DEBUG and up
- ``insider_tracker.log`` rewritten each start, for tailing the current run
- only the newest ``LOG_KEEP_FILES`` per-run files are kept
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from insider_tracker.config import settings

LOGGER_NAME = "insider_tracker"


def _prune_old_logs(logs_dir: Path, keep: int, name: str = LOGGER_NAME) -> list[Path]:
    """Delete the oldest run logs beyond ``keep``; return what was removed."""
    log_files = sorted(logs_dir.glob(f"{name}_*.log"), key=lambda p: p.stat().st_mtime)
    removed = []
    for old in log_files[:max(len(log_files) - keep, 0)]:
        try:
            old.unlink()
        except OSError:
            continue
        removed.append(old)
    return removed


def _console_level(name: str) -> int:
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def _file_handler(path: Path, fmt: logging.Formatter, mode: str = "a") -> logging.FileHandler:
    handler = logging.FileHandler(path, mode=mode, encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(fmt)
    return handler


def _setup_logger(
    name: str = LOGGER_NAME,
    logs_dir: Path | None = None,
    keep: int | None = None,
) -> logging.Logger:
    log = logging.getLogger(name)
    log.setLevel(logging.DEBUG)

    # Reimport guard
    if log.handlers:
        return log

    fmt = logging.Formatter(
        "[%(asctime)s] %(levelname)-8s %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(_console_level(settings.LOG_LEVEL))
    console.setFormatter(fmt)
    log.addHandler(console)

    logs_dir = logs_dir or settings.LOGS_DIR
    logs_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
    run_log = logs_dir / f"{name}_{timestamp}.log"
    log.addHandler(_file_handler(run_log, fmt))

    try:
        log.addHandler(_file_handler(logs_dir / f"{name}.log", fmt, mode="w"))
    except OSError as e:
        log.warning("[Log] Stable log file unavailable: %s", e)

    removed = _prune_old_logs(logs_dir, keep or settings.LOG_KEEP_FILES, name)

    log.info("[Log] Started %s", run_log.name)
    if removed:
        log.debug("[Log] Pruned %d old run log(s)", len(removed))
    missing = settings.missing_keys()
    if missing:
        log.debug("[Log] Provider keys not configured: %s", ", ".join(missing))
    return log


logger = _setup_logger()
