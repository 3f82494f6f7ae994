"""Logging for bam2fastq.

The console only ever sees stderr, since OUTPUT may be a FIFO or
``/dev/stdout`` feeding the next pipeline stage. A run log file is attached
separately, after the command line has been validated, so a rejected
invocation leaves nothing behind on disk.
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional


APP_LOGGER_NAME = "bam2fastq"

FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
CONSOLE_FORMAT = "%(levelname)s: %(message)s"

# A debug log of a large SMRT Cell run is one line per rejected read
DEFAULT_MAX_BYTES = 50 * 1024 * 1024
DEFAULT_BACKUP_COUNT = 3


def _app_logger() -> logging.Logger:
    return logging.getLogger(APP_LOGGER_NAME)


def setup_logging(level: int = logging.WARNING, log_file: Optional[Path] = None) -> None:
    """
    Reset the 'bam2fastq' logger to a single stderr console handler.

    Args:
        level: Console verbosity (WARNING by default, -v INFO, -vv DEBUG)
        log_file: Run log to attach straight away; see ``attach_log_file``
    """
    app_logger = _app_logger()
    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(level)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    app_logger.addHandler(console)
    app_logger.setLevel(level)
    # pysam/htslib and Biopython do not log through here; keep root untouched
    app_logger.propagate = False

    if log_file:
        attach_log_file(log_file)


def attach_log_file(
    log_file: Path,
    max_bytes: int = DEFAULT_MAX_BYTES,
    backup_count: int = DEFAULT_BACKUP_COUNT,
) -> Optional[RotatingFileHandler]:
    """
    Add a rotating DEBUG-level run log to the 'bam2fastq' logger.

    Creates the parent directory if needed. A log file that cannot be
    opened is reported on the console and the run continues without it.

    Returns:
        The attached handler, or None if the file could not be opened
    """
    app_logger = _app_logger()
    log_file = Path(log_file)
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(log_file, maxBytes=max_bytes, backupCount=backup_count)
    except OSError as e:
        app_logger.warning(f"Cannot write log file {log_file}: {e}")
        return None

    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(FILE_FORMAT))
    app_logger.addHandler(handler)
    # Console handler keeps its own level; the logger must pass DEBUG to the file
    app_logger.setLevel(logging.DEBUG)
    return handler


def get_logger(name: str) -> logging.Logger:
    """Return a namespaced logger under 'bam2fastq' root."""
    return _app_logger().getChild(name)


class LogTemplates:
    """Standard log message templates shared by the reader, filter and CLI."""

    FILE_OPENED = "Opened {kind}: {path}"
    FILE_CREATED = "Created output file: {path} ({size:,} bytes)"
    FILE_REMOVED = "Removed partial output file: {path}"

    FILTERING_STATS = "Filtered: {kept:,} kept, {removed:,} removed ({percent:.1f}% pass rate)"
    READ_REJECTED = "Rejected {read_id}: rq={rq:.4f} <= {threshold}"
