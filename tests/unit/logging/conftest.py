import os
from typing import AsyncGenerator
from unittest.mock import MagicMock

import pytest

from pickaxe_agent.logging import Entry, LoggerStream, LoggingConfig, LogLevel, StreamType


@pytest.fixture(autouse=True)
def verbose_logging():
    LoggingConfig().update(log_level="trace")
    yield
    LoggingConfig().update(log_level="error")


@pytest.fixture
def log_directory(tmp_path) -> str:
    return str(tmp_path)


@pytest.fixture
def info_entry() -> Entry:
    return Entry(
        message="agent started",
        level=LogLevel.INFO,
    )


@pytest.fixture
def stdout_writer() -> MagicMock:
    return MagicMock(name="stdout")


@pytest.fixture
def stderr_writer() -> MagicMock:
    return MagicMock(name="stderr")


@pytest.fixture
async def text_stream(
    stdout_writer: MagicMock,
    stderr_writer: MagicMock,
) -> AsyncGenerator[LoggerStream, None]:
    stream = LoggerStream(name="test_stdout")
    stream.set_stream_writer(StreamType.STDOUT, stdout_writer)
    stream.set_stream_writer(StreamType.STDERR, stderr_writer)
    yield stream
    await stream.close()


@pytest.fixture
async def json_stream(
    log_directory: str,
) -> AsyncGenerator[LoggerStream, None]:
    stream = LoggerStream(
        name="test_json",
        path=os.path.join(log_directory, "test.json"),
    )
    yield stream
    await stream.close()
