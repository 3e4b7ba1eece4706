"""
Output side of a named logger.

A stream renders each log as a text line to stdout/stderr (chosen by
``LoggingConfig.output``) unless a log file applies, in which case the log is
appended to it as one msgspec-encoded JSON line. A file applies when the
stream was given a ``path``, or when ``LoggingConfig.directory`` is set
(``<directory>/<stream name>.json``).
"""

import asyncio
import io
import os
import pathlib
import sys
from typing import TextIO

import msgspec

from pickaxe_agent.logging.config import LoggingConfig, StreamType
from pickaxe_agent.logging.models import Log


DEFAULT_TEMPLATE = "{timestamp} - {level} - {logger} - {filename}:{function_name}.{line_number} - {message}"
ERROR_TEMPLATE = "{timestamp} - {level} - {logger} - {filename}:{function_name}.{line_number} - failed to write log: {error}"


def validate_logfile_path(path: str) -> str:
    if pathlib.Path(path).suffix != ".json":
        raise ValueError(f"Log files must be .json files, got: {path}")

    return path


class LoggerStream:

    def __init__(
        self,
        name: str = "default",
        template: str | None = None,
        path: str | None = None,
    ) -> None:
        self.name = name
        self.template = template or DEFAULT_TEMPLATE
        self.path = validate_logfile_path(path) if path else None

        self._config = LoggingConfig()
        self._stream_writers: dict[StreamType, TextIO] = {}
        self._pending: set[asyncio.Task] = set()

        self._logfile: io.BufferedWriter | None = None
        self._logfile_path: str | None = None
        self._file_lock = asyncio.Lock()

    @property
    def logfile_path(self) -> str | None:
        if self.path:
            return self.path

        if directory := self._config.directory:
            return os.path.join(directory, f"{self.name}.json")

        return None

    def set_stream_writer(
        self,
        stream_type: StreamType,
        writer: TextIO,
    ) -> None:
        self._stream_writers[stream_type] = writer

    async def log(
        self,
        log: Log,
        template: str | None = None,
    ) -> None:
        if self._config.enabled(self.name, log.entry.level) is False:
            return

        if logfile_path := self.logfile_path:
            await self._write_to_file(log, logfile_path)

        else:
            self._write_line(log, template or self.template)

    def schedule(
        self,
        log: Log,
        template: str | None = None,
    ) -> None:
        task = asyncio.get_running_loop().create_task(
            self.log(log, template=template)
        )

        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def close(self) -> None:
        if self._pending:
            await asyncio.gather(*list(self._pending))

        async with self._file_lock:
            await asyncio.get_running_loop().run_in_executor(
                None,
                self._close_file,
            )

        for writer in self._stream_writers.values():
            writer.flush()

    def abort(self) -> None:
        for task in self._pending:
            task.cancel()

        try:
            self._close_file()

        except OSError:
            pass

    def _get_stream_writer(self, stream_type: StreamType) -> TextIO:
        if writer := self._stream_writers.get(stream_type):
            return writer

        # Looked up per write so a redirected sys.stdout/sys.stderr is honored.
        return sys.stdout if stream_type == StreamType.STDOUT else sys.stderr

    def _write_line(self, log: Log, template: str) -> None:
        writer = self._get_stream_writer(self._config.output)

        try:
            writer.write(log.entry.render(template, **log.context()) + "\n")
            writer.flush()

        except (KeyError, IndexError, ValueError, OSError) as err:
            self._write_error(log, err)

    async def _write_to_file(self, log: Log, logfile_path: str) -> None:
        loop = asyncio.get_running_loop()
        line = msgspec.json.encode(log) + b"\n"

        async with self._file_lock:
            try:
                if self._logfile is None or self._logfile_path != logfile_path:
                    await loop.run_in_executor(None, self._open_file, logfile_path)

                await loop.run_in_executor(None, self._append, line)

            except OSError as err:
                self._write_error(log, err)

    def _open_file(self, logfile_path: str) -> None:
        self._close_file()

        resolved_path = pathlib.Path(logfile_path).absolute()
        resolved_path.parent.mkdir(parents=True, exist_ok=True)

        self._logfile = open(resolved_path, "ab")
        self._logfile_path = logfile_path

    def _append(self, line: bytes) -> None:
        self._logfile.write(line)
        self._logfile.flush()

    def _close_file(self) -> None:
        if self._logfile is not None and self._logfile.closed is False:
            self._logfile.close()

        self._logfile = None
        self._logfile_path = None

    def _write_error(self, log: Log, err: Exception) -> None:
        stderr = self._get_stream_writer(StreamType.STDERR)
        stderr.write(
            ERROR_TEMPLATE.format(
                level=log.entry.level.value,
                error=repr(err),
                **log.context(),
            ) + "\n"
        )
