"""Tests for logging configuration."""

from loguru import logger

from utils.logging_config import LoggingConfig, setup_logging


class TestSetupLogging:
    """Test suite for setup_logging."""

    def test_level_normalised(self):
        """Test that levels are upper-cased."""
        config = setup_logging("debug", log_to_console=False)

        assert isinstance(config, LoggingConfig)
        assert config.log_level == "DEBUG"

    def test_file_sink(self, tmp_path):
        """Test that records reach the log file."""
        log_file = tmp_path / "logs" / "api.log"
        setup_logging("INFO", log_file=log_file, log_to_console=False)

        logger.bind(request_id="abc").info("Container built")
        logger.debug("Not written")
        logger.remove()

        content = log_file.read_text()
        assert "Container built" in content
        assert "request_id" in content
        assert "Not written" not in content

    def test_package_exports(self):
        """Test that the utils package exposes only the logging setup entry points."""
        import utils

        assert sorted(utils.__all__) == ["LoggingConfig", "setup_logging"]
