import asyncio
from typing import TypeVar

from pickaxe_agent.logging.models import Entry, Log

from .logger_stream import LoggerStream

T = TypeVar('T', bound=Entry)


class Logger:
    """
    Registry of named ``LoggerStream``s.

    Components hold a ``Logger`` and log typed entries to the ``default``
    stream unless a name is given. Streams are created on first use.
    """

    def __init__(self) -> None:
        self._streams: dict[str, LoggerStream] = {}

    def __getitem__(self, name: str) -> LoggerStream:
        return self.stream(name)

    def stream(self, name: str | None = None) -> LoggerStream:
        if name is None:
            name = 'default'

        if (stream := self._streams.get(name)) is None:
            stream = LoggerStream(name=name)
            self._streams[name] = stream

        return stream

    def configure(
        self,
        name: str | None = None,
        template: str | None = None,
        path: str | None = None,
    ) -> LoggerStream:
        if name is None:
            name = 'default'

        self._streams[name] = LoggerStream(
            name=name,
            template=template,
            path=path,
        )

        return self._streams[name]

    async def log(
        self,
        entry: T,
        name: str | None = None,
        template: str | None = None,
    ) -> None:
        stream = self.stream(name)
        await stream.log(
            Log.capture(entry, stream.name, depth=1),
            template=template,
        )

    def schedule(
        self,
        entry: T,
        name: str | None = None,
        template: str | None = None,
    ) -> None:
        stream = self.stream(name)
        stream.schedule(
            Log.capture(entry, stream.name, depth=1),
            template=template,
        )

    async def close(self) -> None:
        if len(self._streams) > 0:
            await asyncio.gather(*[
                stream.close() for stream in self._streams.values()
            ])

    def abort(self) -> None:
        for stream in self._streams.values():
            stream.abort()
