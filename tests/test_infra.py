import json
import logging

import pytest

from infra.logger import JsonLineFormatter, configure_logging, get_logger
from infra.settings import EngineSettings


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_json_lines_escape_messages():
    record = logging.LogRecord("engine.test", logging.INFO, __file__, 7, 'said "%s"', ("hi",), None)

    line = json.loads(JsonLineFormatter().format(record))

    assert line["msg"] == 'said "hi"'
    assert line["level"] == "INFO"
    assert line["logger"] == "engine.test"


def test_configure_logging_writes_the_logfile(tmp_path, restore_root_logger):
    logfile = tmp_path / "logs" / "engine.log"

    configure_logging("DEBUG", logfile=logfile)
    get_logger("engine.test").debug("hello %d", 3)
    for handler in logging.getLogger().handlers:
        handler.flush()

    assert "hello 3" in logfile.read_text(encoding="utf-8")
    assert logging.getLogger("httpx").level == logging.WARNING


def test_settings_read_prefixed_environment(monkeypatch):
    monkeypatch.setenv("ENGINE_STRICT", "true")
    monkeypatch.setenv("ENGINE_GRID_WIDTH", "16")
    monkeypatch.setenv("ENGINE_LOG_LEVEL", "debug")
    monkeypatch.setenv("ENGINE_LOGFILE", "")

    settings = EngineSettings.from_env(env_file=None)

    assert settings.strict is True
    assert settings.grid_width == 16
    assert settings.log_level == "DEBUG"
    assert settings.logfile is None


def test_settings_reject_bad_values(monkeypatch):
    monkeypatch.setenv("ENGINE_JUMP_HEAT_RULE", "sometimes")

    with pytest.raises(ValueError):
        EngineSettings.from_env(env_file=None)
