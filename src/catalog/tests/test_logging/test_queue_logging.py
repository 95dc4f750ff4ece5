import logging
import logging.handlers
from pathlib import Path
from types import SimpleNamespace

from catalog.core.logging.builder import get_queue_stats, setup_logging, stop_queue_logging
from catalog.core.logging.filters import reset_request_id, set_request_id


def make_test_settings(tmp_path: Path, **overrides):
    values = dict(
        ENV="testing",
        LOG_LEVEL="DEBUG",
        LOG_FORMAT="json",
        LOG_TO_STDOUT=False,     # write to files, not the console
        LOG_DIR=tmp_path,
        LOG_MAX_BYTES=1_000_000,
        LOG_BACKUP_COUNT=1,
        ENABLE_SQL_LOGGING=False,
        LOG_USE_QUEUE=True,
        LOG_QUEUE_MAX_SIZE=0,
        LOG_QUEUE_BLOCKING=False,
    )
    values.update(overrides)
    return SimpleNamespace(**values)


def test_queue_listener_writes_file(tmp_path):
    settings = make_test_settings(tmp_path)
    setup_logging(settings)

    assert get_queue_stats()["queue_present"] is True

    logger = logging.getLogger("test.queue")
    token = set_request_id("test-req-1")
    try:
        for i in range(10):
            logger.info("test message %d", i, extra={"iteration": i, "token": "abc"})
    finally:
        reset_request_id(token)

    # stopping the listener drains the queue into the file handlers
    stop_queue_logging()

    text = (tmp_path / "app.log").read_text()
    assert "test message 0" in text
    assert "test message 9" in text
    assert "iteration" in text
    assert "test-req-1" in text
    # the redact filter ran in the producing thread
    assert '"token": "***REDACTED***"' in text


def test_root_only_has_queue_handler(tmp_path):
    setup_logging(make_test_settings(tmp_path))

    handlers = logging.getLogger().handlers
    assert len(handlers) == 1
    assert isinstance(handlers[0], logging.handlers.QueueHandler)

    # non-propagating loggers route through the queue as well
    uvicorn_handlers = logging.getLogger("uvicorn.error").handlers
    assert uvicorn_handlers == handlers


def test_stop_is_idempotent(tmp_path):
    setup_logging(make_test_settings(tmp_path))

    stop_queue_logging()
    stop_queue_logging()

    assert get_queue_stats()["queue_present"] is False
