"""
Unit tests for structured logging setup.
"""

import json
import logging

import pytest

from condition_log.observability import log_operation, setup_logger


class TestSetupLogger:
    """Tests for setup_logger"""

    def test_json_lines_to_file(self, tmp_path):
        log_file = tmp_path / "logs" / "condition_log.log"
        logger = setup_logger("condition_log", level="DEBUG", log_file=log_file)

        logger.info("Record persisted", extra={"record_id": "abc"})
        for handler in logger.handlers:
            handler.flush()

        entry = json.loads(log_file.read_text(encoding="utf-8").splitlines()[-1])
        assert entry["message"] == "Record persisted"
        assert entry["level"] == "INFO"
        assert entry["record_id"] == "abc"
        assert "thread_name" in entry

    def test_repeated_setup_does_not_duplicate_handlers(self):
        setup_logger("condition_log", level="INFO")
        logger = setup_logger("condition_log", level="WARNING", format_type="text")

        assert len(logger.handlers) == 1
        assert logger.level == logging.WARNING
        assert logger.propagate is False

    def test_unknown_level_falls_back_to_info(self):
        assert setup_logger("condition_log", level="LOUD").level == logging.INFO


class TestLogOperation:
    """Tests for log_operation"""

    def test_logs_start_and_completion(self, caplog):
        logger = logging.getLogger("condition_log.tests")

        with caplog.at_level(logging.INFO, logger="condition_log.tests"):
            with log_operation("Persisting record", logger=logger, record_id="abc"):
                pass

        messages = [record.getMessage() for record in caplog.records]
        assert messages == ["Starting: Persisting record", "Completed: Persisting record"]
        assert caplog.records[-1].status == "success"

    def test_logs_failure_and_reraises(self, caplog):
        logger = logging.getLogger("condition_log.tests")

        with caplog.at_level(logging.INFO, logger="condition_log.tests"):
            with pytest.raises(OSError):
                with log_operation("Persisting record", logger=logger):
                    raise OSError("disk full")

        failure = caplog.records[-1]
        assert failure.levelno == logging.ERROR
        assert failure.error_type == "OSError"
