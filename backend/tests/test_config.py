"""Tests for settings parsing and logging setup."""
import logging

from app.config import Settings
from app.utils.logger import LOG_FORMAT, configure_logging, logger


class TestSettings:
    def test_cors_origins_split_and_stripped(self):
        settings = Settings(allowed_origins="http://a.test, http://b.test")
        assert settings.cors_origins == ["http://a.test", "http://b.test"]

    def test_sqlite_detection(self):
        assert Settings(database_url="sqlite:///./kogase.db").is_sqlite
        assert not Settings(database_url="postgresql://u:p@localhost/db").is_sqlite


class TestLogging:
    def test_level_follows_environment(self):
        configure_logging(Settings(environment="development"))
        assert logger.level == logging.DEBUG
        configure_logging(Settings(environment="production"))
        assert logger.level == logging.INFO

    def test_explicit_level_wins(self):
        configure_logging(Settings(environment="development", log_level="warning"))
        assert logger.level == logging.WARNING
        # pytest adds its own capture handlers; only ours is a plain StreamHandler
        ours = [h for h in logger.handlers if type(h) is logging.StreamHandler]
        assert len(ours) == 1
        assert ours[0].formatter._fmt == LOG_FORMAT
        assert ours[0].level == logging.WARNING
        configure_logging(Settings(environment="test"))
