import pytest

from pickaxe_agent.logging import Entry, Logger, LogLevel, StreamType

from tests.mocks import written_lines


class TestLogLevel:
    def test_parse_is_case_insensitive(self):
        assert LogLevel.parse("warn") == LogLevel.WARN
        assert LogLevel.parse("ERROR") == LogLevel.ERROR
        assert LogLevel.parse(LogLevel.DEBUG) == LogLevel.DEBUG

    def test_unknown_level_raises(self):
        with pytest.raises(ValueError):
            LogLevel.parse("verbose")

    def test_severity_follows_declaration_order(self):
        severities = [level.severity for level in LogLevel]

        assert severities == sorted(severities)
        assert LogLevel.TRACE.severity < LogLevel.INFO.severity < LogLevel.FATAL.severity


class TestLogger:
    @pytest.mark.asyncio
    async def test_log_records_caller(self, stdout_writer):
        logger = Logger()
        logger.stream().set_stream_writer(StreamType.STDOUT, stdout_writer)

        await logger.log(
            Entry(message="hello", level=LogLevel.INFO),
            template="{function_name} {message}",
        )
        await logger.close()

        assert written_lines(stdout_writer) == ["test_log_records_caller hello\n"]

    @pytest.mark.asyncio
    async def test_scheduled_entries_flush_on_close(self, stdout_writer):
        logger = Logger()
        logger.stream().set_stream_writer(StreamType.STDOUT, stdout_writer)

        logger.schedule(Entry(message="first", level=LogLevel.INFO), template="{message}")
        logger.schedule(Entry(message="second", level=LogLevel.INFO), template="{message}")
        await logger.close()

        assert sorted(written_lines(stdout_writer)) == ["first\n", "second\n"]

    def test_streams_are_created_once_per_name(self):
        logger = Logger()

        assert logger["agent"] is logger.stream("agent")
        assert logger.stream() is not logger["agent"]

    @pytest.mark.asyncio
    async def test_configure_uses_stream_template(self, stdout_writer):
        logger = Logger()
        stream = logger.configure(name="agent", template="[{logger}] {message}")
        stream.set_stream_writer(StreamType.STDOUT, stdout_writer)

        await logger.log(Entry(message="ready", level=LogLevel.INFO), name="agent")
        await logger.close()

        assert written_lines(stdout_writer) == ["[agent] ready\n"]
