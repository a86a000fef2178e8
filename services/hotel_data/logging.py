"""
Run logging - configure sinks and capture a build's logs to a gzip file.
"""

import gzip
import io
import sys
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Optional

from loguru import logger

CONSOLE_FORMAT = "<level>{level: <8}</level> | {thread.name} | {message}"
CAPTURE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {thread.name} | {message}"


def configure_logging(level: str = "INFO") -> int:
    """Replace loguru's default sink with a stderr sink at the given level."""
    logger.remove()
    return logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT)


class RunLogger:
    """
    Captures logs during a report build and optionally saves them.

    Usage:
        with RunLogger("hotel_report", local_backup_dir="logs") as run:
            # do the build
            logger.info("Processing...")
        # Log is compressed and written to logs/hotel_report_<date>_<time>.log.gz
    """

    def __init__(
        self,
        run_name: str,
        local_backup_dir: Optional[str] = None,
        level: str = "DEBUG",
    ):
        """
        Args:
            run_name: Name used in markers and in the saved file name
            local_backup_dir: Directory for the gzip log (None: keep in memory only)
            level: Minimum level captured
        """
        self.run_name = run_name
        self.local_backup_dir = local_backup_dir
        self.level = level
        self.saved_path: Optional[Path] = None

        self._log_buffer = io.StringIO()
        self._handler_id: Optional[int] = None
        self._start_time: Optional[datetime] = None

    def __enter__(self) -> "RunLogger":
        self._start_time = datetime.now()

        self._handler_id = logger.add(
            self._log_buffer,
            format=CAPTURE_FORMAT,
            level=self.level,
        )

        logger.info(f"=== Run started: {self.run_name} ===")
        logger.info(f"Start time: {self._start_time.isoformat()}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        end_time = datetime.now()
        duration = end_time - self._start_time

        if exc_type:
            logger.error(f"Run failed with error: {exc_val}")

        logger.info(f"End time: {end_time.isoformat()}")
        logger.info(f"Duration: {duration}")
        logger.info(f"=== Run completed: {self.run_name} ===")

        if self._handler_id is not None:
            logger.remove(self._handler_id)
            self._handler_id = None

        if self.local_backup_dir:
            try:
                self.saved_path = self._save_local(self.getvalue(), end_time)
                logger.info(f"Run log saved: {self.saved_path}")
            except OSError as e:
                logger.error(f"Failed to save run log: {e}")

        return False  # Don't suppress exceptions

    def getvalue(self) -> str:
        """Everything captured so far."""
        return self._log_buffer.getvalue()

    def _save_local(self, content: str, timestamp: datetime) -> Path:
        """Compress and write the log file."""
        date_str = timestamp.strftime("%Y-%m-%d")
        time_str = timestamp.strftime("%H%M%S")
        filename = f"{self.run_name}_{date_str}_{time_str}.log.gz"

        backup_dir = Path(self.local_backup_dir)
        backup_dir.mkdir(parents=True, exist_ok=True)

        filepath = backup_dir / filename
        filepath.write_bytes(gzip.compress(content.encode("utf-8")))
        return filepath


@contextmanager
def capture_run_logs(
    run_name: str,
    local_backup_dir: Optional[str] = None,
    level: str = "DEBUG",
):
    """
    Context manager to capture a run's logs.

    Usage:
        with capture_run_logs("hotel_report") as run:
            logger.info("Processing...")
    """
    run_logger = RunLogger(run_name=run_name, local_backup_dir=local_backup_dir, level=level)
    with run_logger as run:
        yield run
