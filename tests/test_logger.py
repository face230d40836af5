import io
import sys

import pytest
from loguru import logger

from mcinstall.logger import resolve_level, setup_logger


@pytest.fixture(autouse=True)
def restore_logger():
    yield
    logger.remove()
    logger.add(sys.stderr)


def test_messages_written_synchronously():
    sink = io.StringIO()
    setup_logger(level="INFO", sink=sink)

    logger.info("已写入 eula.txt")

    assert "已写入 eula.txt" in sink.getvalue()
    assert "| INFO     |" in sink.getvalue()


def test_debug_filtered_at_info():
    sink = io.StringIO()
    setup_logger(level="info", sink=sink)

    logger.debug("hidden")

    assert sink.getvalue() == ""


def test_level_from_environment(monkeypatch):
    monkeypatch.setenv("MCINSTALL_DEBUG", "1")
    assert resolve_level() == "DEBUG"

    monkeypatch.setenv("MCINSTALL_DEBUG", "0")
    assert resolve_level() == "INFO"
    assert resolve_level("warning") == "WARNING"
