"""
Logging configuration for mvfinder.

Every run writes to the console and to four files in
{output.directory}/logs, each name carrying the run timestamp:
    - console:                  INFO (DEBUG with --verbose), printed above progress bars
    - log_full_*.log:           every record, DEBUG and up
    - log_errors_*.log:         ERROR and CRITICAL only
    - search_failures_*.log:    names that produced no collection entry
    - enrichment_failures_*.log: artists whose TheAudioDB details are missing

Usage:
    from mvfinder.core.logger import setup_logging, get_logger

    setup_logging(config.output.directory)
    logger = get_logger(__name__)

    logger.info("Searching artist")
    log_search_failure(logger, "Unknown Band", "no MusicBrainz match")
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import TextIO

from tqdm import tqdm


FILE_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class Colors:
    """ANSI escapes for the console level names."""
    RESET = "\033[0m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    CYAN = "\033[36m"
    WHITE = "\033[37m"
    BOLD = "\033[1m"


class ColoredConsoleFormatter(logging.Formatter):
    """
    Formatter that colors the level name on console output.

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
    Logging handler that writes to console without breaking progress bars.

    Uses tqdm.write() which prints above any active progress bar instead
    of interleaving with its carriage-return updates.
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


class ReportFileHandler(logging.Handler):
    """
    Base handler for the human-readable report files.

    A report handler only writes records carrying its marker attribute
    (passed via ``extra=``); every other record is ignored. Subclasses set
    MARKER and implement _format_entry().

    Attributes:
        report_path: Path to the report file.
        report_file: Open file handle (None until open() is called).
    """

    MARKER = ""

    def __init__(self, report_path: Path) -> None:
        super().__init__()
        self.report_path = report_path
        self.report_file: TextIO | None = None

    def open(self) -> None:
        """Create (or truncate) the report file."""
        self.report_file = open(self.report_path, "w", encoding="utf-8")

    def emit(self, record: logging.LogRecord) -> None:
        if not hasattr(record, self.MARKER):
            return

        if self.report_file is None:
            return

        try:
            self.report_file.write(self._format_entry(record))
            self.report_file.flush()
        except Exception:
            self.handleError(record)

    def _format_entry(self, record: logging.LogRecord) -> str:
        raise NotImplementedError

    def close(self) -> None:
        """Idempotent."""
        if self.report_file is not None:
            try:
                self.report_file.close()
            except OSError:
                pass
            self.report_file = None
        super().close()


class SearchFailureHandler(ReportFileHandler):
    """
    Captures artists that could not be added to the collection.

    Output format in search_failures.log:

        Unknown Band
        no MusicBrainz match

        Another Artist
        TheAudioDB request failed: 503

    Looks for the extra fields:
        - 'search_failed_artist': The artist name as entered
        - 'search_failed_reason': Why it failed
    """

    MARKER = "search_failed_artist"

    def _format_entry(self, record: logging.LogRecord) -> str:
        artist = getattr(record, "search_failed_artist", "Unknown")
        reason = getattr(record, "search_failed_reason", "")
        return f"{artist}\n{reason}\n\n"


class EnrichmentFailureHandler(ReportFileHandler):
    """
    Captures artists whose enrichment (artwork, genre, mood) failed.

    Output format in enrichment_failures.log:

        Daft Punk [111492]
        no artist details returned

    Looks for the extra fields:
        - 'enrichment_failed_artist': Display name of the artist
        - 'enrichment_failed_id': TheAudioDB artist id
        - 'enrichment_failed_reason': Why it failed
    """

    MARKER = "enrichment_failed_artist"

    def _format_entry(self, record: logging.LogRecord) -> str:
        artist = getattr(record, "enrichment_failed_artist", "Unknown")
        artist_id = getattr(record, "enrichment_failed_id", "")
        reason = getattr(record, "enrichment_failed_reason", "")
        return f"{artist} [{artist_id}]\n{reason}\n\n"


class ErrorOnlyFilter(logging.Filter):
    """Filter that only allows ERROR and CRITICAL level records."""

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= logging.ERROR


def setup_logging(output_dir: Path, verbose: bool = False) -> Path:
    """
    Install the console, log file and report handlers on the root logger.

    Replaces any handlers already installed, so each CLI command starts
    from a clean root logger.

    Args:
        output_dir: output.directory; files go to output_dir/logs.
        verbose: Show DEBUG messages on the console as well.

    Returns:
        Path of the logs directory.

    """
    logs_dir = output_dir / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers.clear()

    console_handler = TqdmLoggingHandler()
    console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    console_handler.setFormatter(ColoredConsoleFormatter())
    root_logger.addHandler(console_handler)

    file_formatter = logging.Formatter(FILE_LOG_FORMAT, FILE_DATE_FORMAT)

    full_handler = logging.FileHandler(logs_dir / f"log_full_{timestamp}.log", mode="w", encoding="utf-8")
    full_handler.setLevel(logging.DEBUG)
    full_handler.setFormatter(file_formatter)
    root_logger.addHandler(full_handler)

    error_handler = logging.FileHandler(logs_dir / f"log_errors_{timestamp}.log", mode="w", encoding="utf-8")
    error_handler.setLevel(logging.DEBUG)
    error_handler.setFormatter(file_formatter)
    error_handler.addFilter(ErrorOnlyFilter())
    root_logger.addHandler(error_handler)

    for handler_cls, prefix in (
        (SearchFailureHandler, "search_failures"),
        (EnrichmentFailureHandler, "enrichment_failures"),
    ):
        handler = handler_cls(logs_dir / f"{prefix}_{timestamp}.log")
        handler.open()
        root_logger.addHandler(handler)

    # requests/urllib3 are chatty at DEBUG
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    return logs_dir


def get_logger(name: str) -> logging.Logger:
    """Module logger; records propagate to the handlers set up by setup_logging()."""
    return logging.getLogger(name)


def log_search_failure(
    logger: logging.Logger,
    artist_name: str,
    reason: str
) -> None:
    """
    Log an artist that could not be found or processed.

    Logs a WARNING and attaches the extra fields SearchFailureHandler
    writes to search_failures.log.

    Example:
        log_search_failure(logger, "Unknown Band", "no MusicBrainz match")
    """
    logger.warning(
        f"Search failed: {artist_name} - {reason}",
        extra={
            "search_failed_artist": artist_name,
            "search_failed_reason": reason,
        }
    )


def log_enrichment_failure(
    logger: logging.Logger,
    artist_name: str,
    artist_external_id: str,
    reason: str
) -> None:
    """
    Log an artist whose enrichment failed.

    Logs a WARNING and attaches the extra fields EnrichmentFailureHandler
    writes to enrichment_failures.log.

    Example:
        log_enrichment_failure(logger, "Daft Punk", "111492", "HTTP 503")
    """
    logger.warning(
        f"Enrichment failed: {artist_name} ({artist_external_id}) - {reason}",
        extra={
            "enrichment_failed_artist": artist_name,
            "enrichment_failed_id": artist_external_id,
            "enrichment_failed_reason": reason,
        }
    )


def shutdown_logging() -> None:
    """
    Flush, close and detach all handlers of the root logger.

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
