import contextvars
from typing import Literal

import msgspec

from pickaxe_agent.logging.models import LogLevel, LogLevelName

from .stream_type import StreamType


LogOutput = Literal['stdout', 'stderr']


class LoggingSettings(msgspec.Struct, frozen=True):
    level: LogLevel = LogLevel.INFO
    output: StreamType = StreamType.STDOUT
    directory: str | None = None
    disabled: frozenset[str] = msgspec.field(default_factory=frozenset)


_settings: contextvars.ContextVar[LoggingSettings] = contextvars.ContextVar(
    "_pickaxe_logging_settings",
    default=LoggingSettings(),
)


class LoggingConfig:
    """
    View over the logging settings of the current context.

    Settings live in a contextvar, so ``update()`` called before the event
    loop starts (or at the top of the main task) applies to every task
    created afterwards.
    """

    def update(
        self,
        log_directory: str | None = None,
        log_level: LogLevelName | None = None,
        log_output: LogOutput | None = None,
    ) -> None:
        changes = {}

        if log_directory:
            changes["directory"] = log_directory

        if log_level:
            changes["level"] = LogLevel.parse(log_level)

        if log_output:
            changes["output"] = StreamType(log_output)

        if changes:
            _settings.set(msgspec.structs.replace(_settings.get(), **changes))

    def disable(self, logger_name: str) -> None:
        settings = _settings.get()
        _settings.set(
            msgspec.structs.replace(
                settings,
                disabled=settings.disabled | {logger_name},
            )
        )

    def enabled(self, logger_name: str, log_level: LogLevel) -> bool:
        settings = _settings.get()
        return (
            logger_name not in settings.disabled
            and log_level.severity >= settings.level.severity
        )

    @property
    def level(self) -> LogLevel:
        return _settings.get().level

    @property
    def output(self) -> StreamType:
        return _settings.get().output

    @property
    def directory(self) -> str | None:
        return _settings.get().directory
