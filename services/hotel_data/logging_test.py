"""Tests for run logging."""

import gzip
from pathlib import Path
from tempfile import TemporaryDirectory

import pytest
from loguru import logger

from services.hotel_data.logging import RunLogger, capture_run_logs


class TestRunLogger:
    """Tests for RunLogger class."""

    def test_captures_logs(self):
        """Logger captures log messages."""
        with RunLogger("test") as run:
            logger.info("Test message 1")
            logger.info("Test message 2")

        content = run.getvalue()
        assert "Test message 1" in content
        assert "Test message 2" in content

    def test_includes_start_end_markers(self):
        with RunLogger("hotel_report") as run:
            logger.info("Work in progress")

        content = run.getvalue()
        assert "=== Run started: hotel_report ===" in content
        assert "=== Run completed: hotel_report ===" in content

    def test_includes_timestamps(self):
        with RunLogger("test") as run:
            logger.info("Test")

        content = run.getvalue()
        assert "Start time:" in content
        assert "End time:" in content
        assert "Duration:" in content

    def test_includes_thread_name(self):
        with RunLogger("test") as run:
            logger.info("Test")

        assert "| MainThread |" in run.getvalue()

    def test_stops_capturing_after_exit(self):
        with RunLogger("test") as run:
            logger.info("Inside")
        logger.info("Outside")

        assert "Outside" not in run.getvalue()

    def test_respects_level(self):
        with RunLogger("test", level="WARNING") as run:
            logger.debug("Quiet detail")
            logger.warning("Loud problem")

        content = run.getvalue()
        assert "Quiet detail" not in content
        assert "Loud problem" in content

    def test_saves_local_backup(self):
        """Logger saves a gzip copy when a directory is given."""
        with TemporaryDirectory() as tmpdir:
            with RunLogger("hotel_report", local_backup_dir=tmpdir) as run:
                logger.info("Test message")

            files = list(Path(tmpdir).glob("*.log.gz"))
            assert len(files) == 1
            assert files[0] == run.saved_path
            assert files[0].name.startswith("hotel_report_")

            content = gzip.decompress(files[0].read_bytes()).decode()
            assert "Test message" in content

    def test_creates_backup_directory(self, tmp_path):
        target = tmp_path / "nested" / "logs"

        with RunLogger("test", local_backup_dir=str(target)) as run:
            logger.info("Test")

        assert run.saved_path.parent == target

    def test_no_backup_without_directory(self):
        with RunLogger("test") as run:
            logger.info("Test")

        assert run.saved_path is None

    def test_logs_exception_on_error(self):
        """Errors are captured and not suppressed."""
        with pytest.raises(ValueError):
            with RunLogger("test") as run:
                logger.info("Before error")
                raise ValueError("Test error")

        content = run.getvalue()
        assert "Before error" in content
        assert "Run failed with error" in content
        assert "Test error" in content


class TestCaptureRunLogs:
    """Tests for capture_run_logs context manager."""

    def test_context_manager_works(self):
        with capture_run_logs("test") as run:
            logger.info("Captured message")

        assert "Captured message" in run.getvalue()

    def test_passes_all_options(self):
        with TemporaryDirectory() as tmpdir:
            with capture_run_logs("test", local_backup_dir=tmpdir, level="INFO") as run:
                logger.debug("Hidden")
                logger.info("Shown")

            assert run.level == "INFO"
            assert "Hidden" not in run.getvalue()
            assert len(list(Path(tmpdir).glob("test_*.log.gz"))) == 1
