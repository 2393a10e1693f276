from __future__ import annotations

import logging
from io import StringIO
from unittest.mock import patch

import nct_import.logging.init
from nct_import.logging.init import (
    LabeledFormatter,
    enable_debug,
    get_logger,
    log_summary,
    reset_logging,
    setup_logging,
)


def _capture_logger(name: str) -> tuple[logging.Logger, StringIO]:
    captured_output = StringIO()
    logger = logging.getLogger(name)
    logger.setLevel(logging.INFO)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    logging.addLevelName(25, "SUMMARY")
    handler = logging.StreamHandler(captured_output)
    handler.setLevel(logging.INFO)
    handler.setFormatter(LabeledFormatter())
    logger.addHandler(handler)
    logger.propagate = False
    return logger, captured_output


def test_setup_logging_creates_logger_with_labeled_formatter():
    """Test that setup_logging creates a logger with labeled format."""
    logger = setup_logging()

    assert logger.name == "nct_import"
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 1
    handler = logger.handlers[0]
    assert isinstance(handler, logging.StreamHandler)
    assert isinstance(handler.formatter, LabeledFormatter)
    assert logger.propagate is False


def test_logging_labeled_prefixes():
    """Test that logging outputs have correct labeled prefixes (INFO|WARN|ERROR|SUMMARY)."""
    reset_logging()
    logger, captured_output = _capture_logger("test_nct_import")

    logger.info("Test info message")
    logger.warning("Test warning message")
    logger.error("Test error message")
    logger.log(25, "Test summary message")

    lines = captured_output.getvalue().strip().split("\n")
    assert lines == [
        "INFO Test info message",
        "WARN Test warning message",
        "ERROR Test error message",
        "SUMMARY Test summary message",
    ]


def test_module_loggers_propagate_to_app_logger():
    """Child loggers (logging.getLogger(__name__)) share the app handler."""
    setup_logging()
    captured_output = StringIO()
    app_logger = get_logger()
    app_logger.handlers[0].setStream(captured_output)

    logging.getLogger("nct_import.services.orchestrator").warning("child message")

    assert captured_output.getvalue().strip() == "WARN child message"


def test_get_logger_returns_configured_logger():
    setup_logger = setup_logging()
    logger = get_logger()
    assert logger is setup_logger
    assert logger.name == "nct_import"


def test_setup_logging_idempotent():
    """Test that calling setup_logging multiple times is safe."""
    logger1 = setup_logging()
    logger2 = setup_logging()
    assert logger1 is logger2
    assert len(logger1.handlers) == 1


def test_enable_debug_lowers_levels():
    logger = setup_logging()
    enable_debug(logger)
    try:
        assert logger.level == logging.DEBUG
        assert all(h.level == logging.DEBUG for h in logger.handlers)
    finally:
        logger.setLevel(logging.INFO)
        for h in logger.handlers:
            h.setLevel(logging.INFO)


def test_summary_level_logging():
    """Test custom SUMMARY level (25) logging."""
    logger = setup_logging()
    assert logging.getLevelName(25) == "SUMMARY"
    with patch.object(logger, "_log") as mock_log:
        logger.log(25, "inputs=1/1 failed=0 narratives=3")
        mock_log.assert_called_once()


def test_log_summary_convenience_function():
    """Test the log_summary convenience function."""
    nct_import.logging.init._logger = None
    logger, captured_output = _capture_logger("nct_import")
    nct_import.logging.init._logger = logger

    log_summary("inputs=2/2 failed=0 objectives=1 narratives=4")

    lines = captured_output.getvalue().strip().split("\n")
    assert lines == ["SUMMARY inputs=2/2 failed=0 objectives=1 narratives=4"]
