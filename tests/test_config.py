"""
Tests for settings parsing and logging setup.
"""

import json
import logging
import pytest

from job_tracker.core.config import Settings
from job_tracker.core.logging_config import CustomJsonFormatter, setup_logging


class TestSettings:

    def test_defaults(self):
        s = Settings(_env_file=None)

        assert s.API_PREFIX == "/api"
        assert s.DATABASE_URL == "sqlite:///data/jobs.db"

    def test_database_path_follows_data_dir(self, tmp_path):
        s = Settings(_env_file=None, DATA_DIR=str(tmp_path), DATABASE_FILE="tracker.db")

        assert s.DATABASE_PATH == tmp_path / "tracker.db"
        assert s.DATABASE_URL.endswith("tracker.db")

    def test_cors_origins_json(self):
        s = Settings(_env_file=None, BACKEND_CORS_ORIGINS='["http://a.example"]')
        assert s.BACKEND_CORS_ORIGINS == ["http://a.example"]

    def test_cors_origins_comma_separated(self):
        s = Settings(_env_file=None, BACKEND_CORS_ORIGINS="http://a.example, http://b.example")
        assert s.BACKEND_CORS_ORIGINS == ["http://a.example", "http://b.example"]


class TestLogging:

    @pytest.fixture(autouse=True)
    def restore_root_logger(self):
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        yield
        root.handlers = handlers
        root.setLevel(level)

    def test_json_logs(self, capsys):
        setup_logging(log_level="DEBUG", json_logs=True)
        root = logging.getLogger()

        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, CustomJsonFormatter)

        logging.getLogger("job_tracker.test").warning("disk almost full")

        record = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
        assert record["message"] == "disk almost full"
        assert record["level"] == "WARNING"
        assert record["logger"] == "job_tracker.test"
        assert "line" in record

    def test_plain_logs(self, capsys):
        setup_logging(log_level="INFO", json_logs=False)

        logging.getLogger("job_tracker.test").info("started")

        out = capsys.readouterr().out
        assert "job_tracker.test - INFO - started" in out
