import logging
from types import SimpleNamespace

from catalog.core.logging.builder import make_dict_config, setup_logging
from catalog.core.logging.formatters import ColorFormatter, JsonFormatter


def make_settings(**overrides):
    values = dict(
        ENV="development",
        LOG_FORMAT="json",
        LOG_LEVEL="INFO",
        LOG_TO_STDOUT=False,
        LOG_DIR=None,
        LOG_MAX_BYTES=1000,
        LOG_BACKUP_COUNT=1,
        ENABLE_SQL_LOGGING=False,
    )
    values.update(overrides)
    return SimpleNamespace(**values)


def test_make_dict_config_with_files(tmp_path):
    cfg = make_dict_config(make_settings(LOG_DIR=tmp_path))

    assert set(cfg["handlers"]) == {"console", "file", "error_file"}
    assert cfg["handlers"]["file"]["filename"].endswith("app.log")
    assert cfg["handlers"]["error_file"]["filename"].endswith("errors.log")
    assert cfg["handlers"]["error_file"]["level"] == "ERROR"
    assert cfg["formatters"]["json"]["()"] is JsonFormatter
    assert cfg["formatters"]["json"]["env"] == "development"


def test_make_dict_config_stdout_only(tmp_path):
    cfg = make_dict_config(make_settings(LOG_DIR=tmp_path, LOG_TO_STDOUT=True))

    assert set(cfg["handlers"]) == {"console", "error_console"}
    assert cfg["loggers"][""]["handlers"] == ["console", "error_console"]


def test_text_format_uses_color_formatter(tmp_path):
    cfg = make_dict_config(make_settings(LOG_DIR=tmp_path, LOG_FORMAT="text"))

    assert cfg["formatters"]["standard"]["()"] is ColorFormatter
    assert cfg["handlers"]["console"]["formatter"] == "standard"


def test_sql_logging_toggle(tmp_path):
    quiet = make_dict_config(make_settings(LOG_DIR=tmp_path))
    loud = make_dict_config(make_settings(LOG_DIR=tmp_path, ENABLE_SQL_LOGGING=True))

    assert quiet["loggers"]["sqlalchemy.engine"]["level"] == "WARNING"
    assert loud["loggers"]["sqlalchemy.engine"]["level"] == "DEBUG"


def test_setup_logging_creates_log_dir(tmp_path):
    settings = make_settings(LOG_DIR=tmp_path / "logs")
    assert not settings.LOG_DIR.exists()

    setup_logging(settings)

    assert settings.LOG_DIR.exists()
    root = logging.getLogger()
    assert root.handlers
    assert root.level == logging.INFO


def test_setup_logging_writes_errors_to_separate_file(tmp_path):
    settings = make_settings(LOG_DIR=tmp_path)
    setup_logging(settings)

    log = logging.getLogger("catalog.test")
    log.info("plain info")
    log.error("something broke")
    for handler in logging.getLogger().handlers:
        handler.flush()

    app_log = (tmp_path / "app.log").read_text()
    errors_log = (tmp_path / "errors.log").read_text()
    assert "plain info" in app_log and "something broke" in app_log
    assert "something broke" in errors_log
    assert "plain info" not in errors_log
