import logging

import pytest
from pyfakefs.fake_filesystem import FakeFilesystem

from titleholds.core.config import CannotLoadConfiguration
from titleholds.service.logging.configuration import LoggingConfiguration, LogLevel


class TestLogLevel:
    def test_levelno(self):
        assert LogLevel.debug.levelno == logging.DEBUG
        assert LogLevel.error.levelno == logging.ERROR
        assert LogLevel.warning == "WARNING"

    @pytest.mark.parametrize(
        "level, expected",
        [
            (logging.INFO, LogLevel.info),
            ("warning", LogLevel.warning),
            ("DEBUG", LogLevel.debug),
        ],
    )
    def test_from_level(self, level: int | str, expected: LogLevel):
        assert LogLevel.from_level(level) is expected

    def test_from_level_invalid(self):
        with pytest.raises(ValueError, match="'loud' is not a valid LogLevel"):
            LogLevel.from_level("loud")


class TestLoggingConfiguration:
    @pytest.fixture(autouse=True)
    def environment(self, monkeypatch: pytest.MonkeyPatch, fs: FakeFilesystem):
        fs.create_file(".env", contents="")
        for key in ("LEVEL", "VERBOSE_LEVEL", "DEBUG_TRACEBACK_INTERVAL"):
            monkeypatch.delenv(f"TITLEHOLDS_LOG_{key}", raising=False)

    def test_defaults(self):
        config = LoggingConfiguration()
        assert config.level is LogLevel.info
        assert config.verbose_level is LogLevel.warning
        assert config.debug_traceback_interval == 0

    def test_environment(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("TITLEHOLDS_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("TITLEHOLDS_LOG_DEBUG_TRACEBACK_INTERVAL", "30")
        config = LoggingConfiguration()
        assert config.level is LogLevel.debug
        assert config.debug_traceback_interval == 30

    def test_invalid(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("TITLEHOLDS_LOG_DEBUG_TRACEBACK_INTERVAL", "-5")
        with pytest.raises(CannotLoadConfiguration) as excinfo:
            LoggingConfiguration()
        assert "TITLEHOLDS_LOG_DEBUG_TRACEBACK_INTERVAL" in str(excinfo.value)
