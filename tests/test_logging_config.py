"""Tests for logging_config.py utility functions."""

import os
import sys
import logging
from unittest.mock import patch, MagicMock
from image_derivatives.core.logging_config import (
    setup_logger,
    get_logger,
    configure_multiprocessing_logging,
    logger,
)


def stream_handlers(test_logger):
    return [h for h in test_logger.handlers if type(h) is logging.StreamHandler]


class TestSetupLogger:
    """Tests for setup_logger function."""

    def test_setup_logger_default_parameters(self):
        """Test setup_logger with default parameters."""
        with patch.dict(os.environ, {}, clear=False):
            os.environ.pop("LOG_LEVEL", None)
            test_logger = setup_logger()
        assert test_logger.name == "image-derivatives"
        assert test_logger.level == logging.INFO
        assert len(stream_handlers(test_logger)) == 1
        assert not test_logger.propagate

    def test_setup_logger_custom_level_by_parameter(self):
        """Test setup_logger with custom level via parameter."""
        test_logger = setup_logger(name="test-param-level", level="DEBUG")
        assert test_logger.level == logging.DEBUG

    def test_setup_logger_custom_level_by_env_var(self):
        """Test setup_logger with custom level via environment variable."""
        with patch.dict(os.environ, {"LOG_LEVEL": "WARNING"}):
            test_logger = setup_logger(name="test-env-level")
            assert test_logger.level == logging.WARNING

    def test_setup_logger_invalid_level_defaults_to_info(self):
        """Test setup_logger with invalid level defaults to INFO."""
        test_logger = setup_logger(name="test-invalid-level", level="INVALID_LEVEL")
        assert test_logger.level == logging.INFO

    def test_setup_logger_structured_format(self):
        """Test setup_logger with structured format."""
        with patch.dict(os.environ, {"LOG_FORMAT": "structured"}):
            test_logger = setup_logger(name="test-structured")
        format_string = stream_handlers(test_logger)[0].formatter._fmt
        assert "%(filename)s" in format_string
        assert "%(lineno)d" in format_string
        assert "%(funcName)s" in format_string

    def test_setup_logger_env_format_override(self):
        """LOG_FORMAT wins over the format_type parameter."""
        with patch.dict(os.environ, {"LOG_FORMAT": "simple"}):
            test_logger = setup_logger(name="test-env-format", format_type="structured")
            format_string = stream_handlers(test_logger)[0].formatter._fmt
            assert "%(filename)s" not in format_string
            assert "%(message)s" in format_string

    def test_setup_logger_no_duplicate_handlers(self):
        """Test that setup_logger doesn't add duplicate handlers."""
        test_logger1 = setup_logger(name="test-no-duplicates")
        test_logger2 = setup_logger(name="test-no-duplicates")

        assert test_logger1 is test_logger2
        assert len(stream_handlers(test_logger1)) == 1

    def test_setup_logger_ignores_foreign_handlers(self):
        """A capture handler already attached does not suppress the stdout handler."""

        class CaptureHandler(logging.StreamHandler):
            pass

        logging.getLogger("test-foreign-handler").addHandler(CaptureHandler())

        test_logger = setup_logger(name="test-foreign-handler")

        assert len(test_logger.handlers) == 2
        assert stream_handlers(test_logger)[0].stream is sys.stdout

    def test_setup_logger_handler_uses_stdout(self):
        """Test that logger handler uses stdout."""
        test_logger = setup_logger(name="test-stdout")
        assert stream_handlers(test_logger)[0].stream is sys.stdout


class TestGetLogger:
    """Tests for get_logger function."""

    def test_get_logger_default_name(self):
        assert get_logger().name == "image-derivatives"

    def test_get_logger_nests_custom_name(self):
        """Custom names are placed under the package namespace."""
        assert get_logger("processor").name == "image-derivatives.processor"

    def test_get_logger_keeps_already_nested_name(self):
        assert get_logger("image-derivatives.handler").name == "image-derivatives.handler"

    def test_get_logger_returns_configured_logger(self):
        test_logger = get_logger(name="test-configured")
        assert len(stream_handlers(test_logger)) == 1
        assert not test_logger.propagate


class TestConfigureMultiprocessingLogging:
    """Tests for configure_multiprocessing_logging function."""

    @patch("multiprocessing.current_process")
    @patch("image_derivatives.core.logging_config.setup_logger")
    def test_configure_multiprocessing_logging(
        self, mock_setup_logger, mock_current_process
    ):
        """Each worker process gets its own logger name."""
        mock_process = MagicMock()
        mock_process.name = "ForkProcess-1"
        mock_current_process.return_value = mock_process

        configure_multiprocessing_logging()

        mock_setup_logger.assert_called_once_with("image-derivatives.ForkProcess-1")


class TestDefaultLogger:
    """Tests for default logger instance."""

    def test_default_logger_exists(self):
        assert isinstance(logger, logging.Logger)
        assert logger.name == "image-derivatives"
        assert not logger.propagate
