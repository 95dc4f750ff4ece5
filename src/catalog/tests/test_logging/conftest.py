import pytest

from catalog.config.settings import Settings
from catalog.core.logging.builder import setup_logging, stop_queue_logging


@pytest.fixture(autouse=True)
def restore_logging():
    """
    Tests in this package reconfigure the root logger (sometimes onto a
    capsys stream or a tmp_path file); put the suite's quiet config back.
    """
    yield
    stop_queue_logging()
    setup_logging(Settings(ENV="testing", LOG_LEVEL="WARNING", LOG_FORMAT="text", LOG_TO_STDOUT=True))
