"""
Unit tests for logger configuration
"""

import pytest
from loguru import logger

from hscode_centrovert.config.settings import Config
from hscode_centrovert.utils.logging_utils import log_connector_outcome, setup_logger


@pytest.fixture
def logs_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(Config, "LOGS_DIR", tmp_path / "logs")
    yield Config.LOGS_DIR
    logger.remove()


class TestSetupLogger:
    """Test cases for setup_logger"""

    @pytest.mark.parametrize("front_end, filename", [
        ("cli", Config.MAIN_LOG_FILE),
        ("streamlit", Config.STREAMLIT_LOG_FILE),
    ])
    def test_front_end_log_file(self, logs_dir, front_end, filename):
        """Test that each front end writes to its own log file"""
        log_file = setup_logger(front_end)
        assert log_file == logs_dir / filename
        assert logs_dir.is_dir()

    def test_connector_outcomes_reach_file(self, logs_dir):
        """Test that connector outcomes are written to the file sink"""
        log_file = setup_logger("cli")
        log_connector_outcome("singapore_hsa", "skipped", "Empty query")
        logger.remove()
        content = log_file.read_text(encoding="utf-8")
        assert "Logging to" in content
        assert "singapore_hsa" in content
