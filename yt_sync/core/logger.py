"""
Logging configuration for yt-sync.

This module sets up the logging system with multiple outputs:
    - Console: Status messages, tqdm-compatible so the per-playlist
      progress bar is not broken by log lines
    - log_full_<timestamp>.log: Complete log of all events (DEBUG and above)
    - log_errors_<timestamp>.log: Only ERROR and CRITICAL level messages
    - fetch_failures_<timestamp>.log: Items whose download failed, with the
      URL to retry by hand

Everything written to the screen is also saved to file, then filtered
into the specialized files.

Log File Locations:
    All log files are created in the log directory from config.yaml
    (default: the 'logs' directory next to config.yaml).

Usage:
    from yt_sync.core.logger import setup_logging, get_logger

    setup_logging(log_dir, verbose=False)  # Call once at startup
    logger = get_logger(__name__)          # Get logger for each module

    logger.info("Downloading playlist: PLxxx")
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import TextIO

from tqdm import tqdm


# Log format for file output (detailed with timestamp)
FILE_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class Colors:
    """ANSI color codes for terminal output."""
    RESET = "\033[0m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    WHITE = "\033[37m"
    BOLD = "\033[1m"


class ColoredConsoleFormatter(logging.Formatter):
    """
    Formatter that prefixes console messages with a colored level name.

    Colors:
        - DEBUG: Blue
        - INFO: Green
        - WARNING: Yellow
        - ERROR: Red
        - CRITICAL: Bold Red
    """

    LEVEL_COLORS = {
        logging.DEBUG: Colors.BLUE,
        logging.INFO: Colors.GREEN,
        logging.WARNING: Colors.YELLOW,
        logging.ERROR: Colors.RED,
        logging.CRITICAL: Colors.BOLD + Colors.RED,
    }

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno, Colors.WHITE)
        return f"{color}{record.levelname}{Colors.RESET}: {record.getMessage()}"


class TqdmLoggingHandler(logging.Handler):
    """
    Logging handler that writes to the console without breaking tqdm progress bars.

    tqdm redraws its bar in place with carriage returns; a plain stream
    handler would print in the middle of the bar. tqdm.write() prints the
    message above any active bar instead.
    """

    def __init__(self, stream: TextIO = sys.stderr) -> None:
        super().__init__()
        self.stream = stream

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
            tqdm.write(msg, file=self.stream)
        except Exception:
            self.handleError(record)


class FetchFailureHandler(logging.Handler):
    """
    Handler that collects failed item fetches into a report file.

    Only records carrying the extra fields set by log_fetch_failure() are
    written, in a simple human-readable format:

        PLxxxxxxxx dQw4w9WgXcQ (exit code 1)
        https://www.youtube.com/watch?v=dQw4w9WgXcQ

    Attributes:
        report_path: Path to the fetch_failures log file.
        report_file: Open file handle (set by open()).
    """

    def __init__(self, report_path: Path) -> None:
        super().__init__()
        self.report_path = report_path
        self.report_file: TextIO | None = None

    def open(self) -> None:
        """Open the report file for writing (overwrites existing content)."""
        self.report_file = open(self.report_path, "w", encoding="utf-8")

    def emit(self, record: logging.LogRecord) -> None:
        if not hasattr(record, "fetch_failed_item_id"):
            return

        if self.report_file is None:
            return

        try:
            item_id = getattr(record, "fetch_failed_item_id")
            playlist_id = getattr(record, "fetch_failed_playlist_id", None) or "-"
            url = getattr(record, "fetch_failed_url", "")
            exit_code = getattr(record, "fetch_failed_exit_code", None)

            reason = f"exit code {exit_code}" if exit_code is not None else "not started"
            self.report_file.write(f"{playlist_id} {item_id} ({reason})\n")
            self.report_file.write(f"{url}\n\n")
            self.report_file.flush()
        except Exception:
            self.handleError(record)

    def close(self) -> None:
        """Close the report file handle. Safe to call multiple times."""
        if self.report_file is not None:
            try:
                self.report_file.close()
            except OSError:
                pass
            self.report_file = None
        super().close()


class ErrorOnlyFilter(logging.Filter):
    """Filter that only allows ERROR and CRITICAL level records."""

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= logging.ERROR


def setup_logging(log_dir: Path, verbose: bool = False) -> None:
    """
    Configure the logging system for the application.

    This function should be called ONCE at application startup, after
    the configuration is loaded but before any sync work starts.

    Args:
        log_dir: Directory where log files will be created.
        verbose: Show DEBUG messages (playlist contents, directory snapshot,
                 per-item announcements) on the console.

    Behavior:
        1. Create log_dir if it doesn't exist
        2. Configure root logger level to DEBUG
        3. Console handler (TqdmLoggingHandler), INFO or DEBUG when verbose
        4. Full log file handler (DEBUG)
        5. Error log file handler (ERROR+ via ErrorOnlyFilter)
        6. Fetch failures report handler
    """
    log_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # Remove any existing handlers
    root_logger.handlers.clear()

    console_handler = TqdmLoggingHandler()
    console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    console_handler.setFormatter(ColoredConsoleFormatter())
    root_logger.addHandler(console_handler)

    full_handler = logging.FileHandler(
        log_dir / f"log_full_{timestamp}.log", mode="w", encoding="utf-8"
    )
    full_handler.setLevel(logging.DEBUG)
    full_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, FILE_DATE_FORMAT))
    root_logger.addHandler(full_handler)

    error_handler = logging.FileHandler(
        log_dir / f"log_errors_{timestamp}.log", mode="w", encoding="utf-8"
    )
    error_handler.setLevel(logging.DEBUG)  # Filter handles the level restriction
    error_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, FILE_DATE_FORMAT))
    error_handler.addFilter(ErrorOnlyFilter())
    root_logger.addHandler(error_handler)

    failures_handler = FetchFailureHandler(log_dir / f"fetch_failures_{timestamp}.log")
    failures_handler.open()
    root_logger.addHandler(failures_handler)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Args:
        name: The logger name, typically __name__ of the calling module.

    Note:
        Loggers obtained before setup_logging() is called have no handlers
        of their own; records only show up once setup_logging() has run.
    """
    return logging.getLogger(name)


def log_fetch_failure(
    logger: logging.Logger,
    item_id: str,
    url: str,
    error_message: str,
    exit_code: int | None = None,
    playlist_id: str | None = None
) -> None:
    """
    Log an item whose fetch failed.

    Logs an ERROR record and attaches the extra fields FetchFailureHandler
    uses to write the failures report.

    Args:
        logger: The logger to use for the message.
        item_id: Remote id of the item.
        url: URL that was passed to the acquisition tool.
        error_message: Description of the failure (arguments, tool output).
        exit_code: Tool exit code, or None if the tool could not be started.
        playlist_id: Playlist the item belongs to, when known.
    """
    logger.error(
        f"Download failed: {item_id} - {error_message}",
        extra={
            "fetch_failed_item_id": item_id,
            "fetch_failed_url": url,
            "fetch_failed_exit_code": exit_code,
            "fetch_failed_playlist_id": playlist_id,
        }
    )


def shutdown_logging() -> None:
    """
    Flush and close all handlers and detach them from the root logger.

    Typically called in a finally block at application exit.
    """
    root_logger = logging.getLogger()

    for handler in root_logger.handlers[:]:
        try:
            handler.flush()
            handler.close()
        except OSError:
            pass
        root_logger.removeHandler(handler)
